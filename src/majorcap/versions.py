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

"""Semantic version helpers for tag names.

Tag names are parsed with :mod:`semantic_version` after stripping
surrounding whitespace and a single leading ``v`` (``v1.2.3`` and
``1.2.3`` are the same version). Anything that is not a strict
SemVer 2.0 string (``latest``, ``release-foo``, ``1.2``) is rejected.

Ordering always uses semver precedence, never string order::

    sort_candidates(['v2.0.0', 'v10.0.0', 'v9.5.1'])
    # -> v10.0.0, v9.5.1, v2.0.0

Pure module: no I/O, no logging.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import semantic_version

# Version assumed when the project has never been released.
INITIAL_VERSION = '0.0.0'


class TagSource(str, Enum):
    """Which hosting listing a candidate came from."""

    RELEASE = 'release'
    TAG = 'tag'


@dataclass(frozen=True)
class TagCandidate:
    """A semver-valid upstream tag.

    Attributes:
        name: The raw tag name as published (e.g. ``"v2.1.0"``).
        version: The parsed semantic version.
        source: Whether it came from the releases or the tags listing.
        sha: Commit SHA the tag points to, when the listing exposes it.
    """

    name: str
    version: semantic_version.Version
    source: TagSource = TagSource.RELEASE
    sha: str = ''

    @property
    def major(self) -> int:
        """Major component, with prerelease and build metadata ignored."""
        return self.version.major


def parse_version(name: str) -> semantic_version.Version | None:
    """Parse a tag name as a semantic version.

    Args:
        name: Tag or version string, with or without a leading ``v``.

    Returns:
        The parsed version, or ``None`` if the name is not valid semver.
    """
    text = name.strip()
    if text.startswith('v'):
        text = text[1:]
    try:
        return semantic_version.Version(text)
    except ValueError:
        return None


def sort_candidates(
    names: Iterable[str],
    *,
    source: TagSource = TagSource.RELEASE,
    shas: dict[str, str] | None = None,
) -> list[TagCandidate]:
    """Keep the semver-valid names and sort them highest first.

    Names that are not semver are dropped silently. The sort is stable,
    so two names with the same precedence (``v1.0.0`` and ``1.0.0``)
    keep their input order and the first one wins.

    Args:
        names: Tag names in fetch order.
        source: Listing the names came from.
        shas: Optional mapping of tag name to commit SHA.

    Returns:
        Candidates in descending semver precedence.
    """
    shas = shas or {}
    candidates: list[TagCandidate] = []
    for name in names:
        version = parse_version(name)
        if version is None:
            continue
        candidates.append(TagCandidate(name=name, version=version, source=source, sha=shas.get(name, '')))
    return sorted(candidates, key=lambda c: c.version, reverse=True)


def next_major(current: str | None) -> int | None:
    """Compute the major of ``current`` after an increment-major bump.

    Follows the usual increment semantics: ``1.9.0`` becomes ``2.0.0``,
    while a prerelease of a major (``2.0.0-rc.1``) becomes ``2.0.0``.

    Args:
        current: Last released version; ``None`` or empty means
            :data:`INITIAL_VERSION`.

    Returns:
        The next major number, or ``None`` if ``current`` is not a valid
        semantic version.
    """
    version = parse_version(current or INITIAL_VERSION)
    if version is None:
        return None
    return version.next_major().major


__all__ = [
    'INITIAL_VERSION',
    'TagCandidate',
    'TagSource',
    'next_major',
    'parse_version',
    'sort_candidates',
]
