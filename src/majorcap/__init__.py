# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""majorcap: keep a fork's major version at or below its upstream's.

A release pipeline plugin that reads the highest semver release of an
upstream GitHub repository and refuses a major bump that would take the
downstream project past that major number.

Modules::

    versions   semver parsing and tag ordering
    github     GitHub REST client (releases, tags, compare)
    resolver   upstream tags ──→ major cap
    gate       verdict + last version + cap ──→ verdict or block
    plugin     verify_conditions / analyze_commits hooks
    analyzer   conventional-commit classifier
    config     majorcap.toml / [tool.majorcap] loading
    vcs        local git: last release tag, commits since
    cli        ``majorcap`` command
"""

__version__ = '0.1.0'
