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

"""Shared test fakes for majorcap.

Usage::

    from tests._fakes import FakeClassifier, FakeUpstream

    upstream = FakeUpstream(releases=['v2.0.0', 'v1.4.0'])
    classifier = FakeClassifier(ReleaseType.MAJOR)
"""

from tests._fakes._classifier import FakeClassifier as FakeClassifier
from tests._fakes._upstream import FakeUpstream as FakeUpstream

__all__ = [
    'FakeClassifier',
    'FakeUpstream',
]
