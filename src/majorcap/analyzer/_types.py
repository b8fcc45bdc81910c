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

"""Pure types for commit classification.

Frozen dataclasses, an enum and a protocol. No I/O, no logging.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class ReleaseType(Enum):
    """Release verdicts, ordered by precedence (highest first).

    ``NONE`` means the commits do not warrant a release.
    """

    MAJOR = 'major'
    MINOR = 'minor'
    PATCH = 'patch'
    NONE = 'none'


# Lower index = higher precedence.
RELEASE_PRECEDENCE: list[ReleaseType] = [
    ReleaseType.MAJOR,
    ReleaseType.MINOR,
    ReleaseType.PATCH,
    ReleaseType.NONE,
]


def max_release(a: ReleaseType, b: ReleaseType) -> ReleaseType:
    """Return the higher-precedence release type.

    >>> max_release(ReleaseType.MINOR, ReleaseType.PATCH)
    <ReleaseType.MINOR: 'minor'>
    >>> max_release(ReleaseType.NONE, ReleaseType.MAJOR)
    <ReleaseType.MAJOR: 'major'>
    """
    return RELEASE_PRECEDENCE[min(RELEASE_PRECEDENCE.index(a), RELEASE_PRECEDENCE.index(b))]


@dataclass(frozen=True)
class Commit:
    """A commit as seen by a classifier.

    Attributes:
        header: First line of the commit message.
        body: Remaining lines (may carry ``BREAKING CHANGE:`` notes).
        hash: Commit SHA, for logging only.
    """

    header: str
    body: str = ''
    hash: str = ''

    @property
    def message(self) -> str:
        """Full message: header, blank line, body."""
        if not self.body:
            return self.header
        return f'{self.header}\n\n{self.body}'


@runtime_checkable
class CommitClassifier(Protocol):
    """Protocol for turning a commit list into a release verdict.

    The gate only needs this contract, so tests can inject a stub that
    returns a fixed verdict.
    """

    def classify(self, commits: Sequence[Commit], config: Mapping[str, Any]) -> ReleaseType:
        """Return the release type warranted by ``commits``.

        Args:
            commits: Commits since the last release, oldest or newest first.
            config: Classifier configuration.

        Returns:
            The strongest release type over all commits.
        """
        ...
