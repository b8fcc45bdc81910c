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

"""Fake commit classifier returning a fixed verdict."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from majorcap.analyzer import Commit, ReleaseType


class FakeClassifier:
    """CommitClassifier test double.

    Records the config it was called with for assertions.
    """

    def __init__(self, verdict: ReleaseType) -> None:
        """Initialize with the verdict to return."""
        self._verdict = verdict
        self.configs: list[Mapping[str, Any]] = []

    def classify(self, commits: Sequence[Commit], config: Mapping[str, Any]) -> ReleaseType:
        """Return the configured verdict."""
        self.configs.append(config)
        return self._verdict
