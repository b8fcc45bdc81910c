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

"""Tests for majorcap.versions module."""

from __future__ import annotations

import pytest
from majorcap.versions import (
    TagSource,
    next_major,
    parse_version,
    sort_candidates,
)


class TestParseVersion:
    """Tests for parse_version()."""

    @pytest.mark.parametrize('name', ['1.2.3', 'v1.2.3', ' v1.2.3 ', '1.2.3-rc.1', '1.2.3+build.5'])
    def test_valid(self, name: str) -> None:
        """Semver names parse, with or without a leading v."""
        version = parse_version(name)
        assert version is not None
        assert version.major == 1

    @pytest.mark.parametrize('name', ['latest', 'release-foo', '1.2', 'vv1.2.3', '', 'docs-2024'])
    def test_invalid(self, name: str) -> None:
        """Non-semver names are rejected."""
        assert parse_version(name) is None

    def test_prerelease_keeps_major(self) -> None:
        """A prerelease tag still reports its major."""
        version = parse_version('v3.0.0-beta.2')
        assert version is not None
        assert version.major == 3


class TestSortCandidates:
    """Tests for sort_candidates()."""

    def test_semver_precedence_not_string_order(self) -> None:
        """v10 sorts above v9 and v2."""
        result = sort_candidates(['v2.0.0', 'v10.0.0', 'v9.5.1'])
        assert [c.name for c in result] == ['v10.0.0', 'v9.5.1', 'v2.0.0']
        assert result[0].major == 10

    def test_drops_invalid_names(self) -> None:
        """Non-semver names are dropped silently."""
        result = sort_candidates(['latest', 'v1.0.0', 'nightly', '0.9.0'])
        assert [c.name for c in result] == ['v1.0.0', '0.9.0']

    def test_prerelease_below_release(self) -> None:
        """A prerelease has lower precedence than its release."""
        result = sort_candidates(['v2.0.0-rc.1', 'v2.0.0', 'v1.9.9'])
        assert [c.name for c in result] == ['v2.0.0', 'v2.0.0-rc.1', 'v1.9.9']

    def test_stable_for_equal_precedence(self) -> None:
        """Equal versions keep their fetch order."""
        result = sort_candidates(['1.0.0', 'v1.0.0'])
        assert [c.name for c in result] == ['1.0.0', 'v1.0.0']

    def test_empty(self) -> None:
        """No names gives no candidates."""
        assert sort_candidates([]) == []

    def test_source_and_sha(self) -> None:
        """Source and SHA are carried onto candidates."""
        result = sort_candidates(['v1.0.0'], source=TagSource.TAG, shas={'v1.0.0': 'abc123'})
        assert result[0].source == TagSource.TAG
        assert result[0].sha == 'abc123'


class TestNextMajor:
    """Tests for next_major()."""

    @pytest.mark.parametrize(
        ('current', 'expected'),
        [
            ('1.9.0', 2),
            ('2.0.0', 3),
            ('v0.4.1', 1),
            ('2.0.0-rc.1', 2),
            ('2.1.0-rc.1', 3),
        ],
    )
    def test_increment(self, current: str, expected: int) -> None:
        """Computes the major after a major bump."""
        assert next_major(current) == expected

    def test_never_released(self) -> None:
        """None and empty default to 0.0.0, so the next major is 1."""
        assert next_major(None) == 1
        assert next_major('') == 1

    def test_invalid(self) -> None:
        """An unparsable version gives None."""
        assert next_major('not-a-version') is None
