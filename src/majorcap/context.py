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

"""Per-run context shared by the lifecycle hooks."""

from __future__ import annotations

from dataclasses import dataclass, field

from majorcap.analyzer import Commit


@dataclass
class RunContext:
    """State owned by the enclosing release pipeline for one run.

    ``verify_conditions`` writes :attr:`major_cap_from_upstream` once;
    ``analyze_commits`` reads it at most once.

    Attributes:
        commits: Commits since the last release.
        last_release_version: Version of the last release, or ``None``
            if the project was never released.
        major_cap_from_upstream: Cap resolved by ``verify_conditions``,
            ``None`` until then.
    """

    commits: list[Commit] = field(default_factory=list)
    last_release_version: str | None = None
    major_cap_from_upstream: int | None = None
