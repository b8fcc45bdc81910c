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

"""Tests for the conventional-commit classifier."""

from __future__ import annotations

import pytest
from majorcap.analyzer import (
    Commit,
    CommitClassifier,
    ConventionalCommitClassifier,
    ReleaseType,
    classify,
    max_release,
    parse_header,
)
from majorcap.errors import E, ConfigurationError


def _c(header: str, body: str = '') -> Commit:
    return Commit(header=header, body=body)


class TestCommit:
    """Tests for the Commit type."""

    def test_message_joins_header_and_body(self) -> None:
        """Message is header, blank line, body."""
        assert _c('feat: x', 'details').message == 'feat: x\n\ndetails'
        assert _c('feat: x').message == 'feat: x'


class TestParseHeader:
    """Tests for parse_header()."""

    def test_type_and_scope(self) -> None:
        """Type and scope are extracted."""
        parsed = parse_header(_c('feat(api): add endpoint'))
        assert parsed.type == 'feat'
        assert parsed.scope == 'api'
        assert not parsed.breaking

    def test_bang_is_breaking(self) -> None:
        """The ! marker is breaking in the conventionalcommits preset."""
        assert parse_header(_c('refactor!: drop py3.9')).breaking

    def test_bang_ignored_by_angular(self) -> None:
        """The angular preset ignores the ! marker."""
        assert not parse_header(_c('refactor!: drop py3.9'), preset='angular').breaking

    def test_breaking_note_in_body(self) -> None:
        """A BREAKING CHANGE footer is breaking in both presets."""
        commit = _c('fix: tweak', 'Some text.\n\nBREAKING CHANGE: renamed flag')
        assert parse_header(commit).breaking
        assert parse_header(commit, preset='angular').breaking

    def test_github_revert(self) -> None:
        """GitHub's revert format is recognised."""
        parsed = parse_header(_c('Revert "feat: add thing"'))
        assert parsed.revert
        assert parsed.type == 'revert'

    def test_non_conventional(self) -> None:
        """Free-form headers have no type."""
        assert parse_header(_c('Update README')).type == ''


class TestClassify:
    """Tests for ConventionalCommitClassifier.classify()."""

    def test_satisfies_protocol(self) -> None:
        """The default classifier is a CommitClassifier."""
        assert isinstance(ConventionalCommitClassifier(), CommitClassifier)

    def test_empty_is_none(self) -> None:
        """No commits means no release."""
        assert classify([]) == ReleaseType.NONE

    @pytest.mark.parametrize(
        ('header', 'expected'),
        [
            ('feat: add', ReleaseType.MINOR),
            ('fix: bug', ReleaseType.PATCH),
            ('perf: faster', ReleaseType.PATCH),
            ('docs: typo', ReleaseType.NONE),
            ('chore(deps): bump', ReleaseType.NONE),
            ('feat!: remove old api', ReleaseType.MAJOR),
            ('revert: feat: add', ReleaseType.PATCH),
        ],
    )
    def test_default_rules(self, header: str, expected: ReleaseType) -> None:
        """Default rules map types to releases."""
        assert classify([_c(header)]) == expected

    def test_highest_wins(self) -> None:
        """The verdict is the highest over all commits."""
        commits = [_c('fix: a'), _c('feat: b'), _c('docs: c')]
        assert classify(commits) == ReleaseType.MINOR

    def test_breaking_footer_is_major(self) -> None:
        """A BREAKING CHANGE footer makes a major."""
        commits = [_c('fix: a'), _c('fix: b', 'BREAKING CHANGE: removed x')]
        assert classify(commits) == ReleaseType.MAJOR

    def test_angular_preset(self) -> None:
        """feat! is only minor under angular."""
        assert classify([_c('feat!: x')], {'preset': 'angular'}) == ReleaseType.MINOR

    def test_skip_marker(self) -> None:
        """Commits marked [skip release] are ignored."""
        commits = [_c('feat!: big [skip release]'), _c('fix: small', 'body [release skip]'), _c('docs: d')]
        assert classify(commits) == ReleaseType.NONE

    def test_custom_rule_overrides_default(self) -> None:
        """A matching custom rule replaces the defaults for that commit."""
        config = {'release_rules': [{'type': 'docs', 'scope': 'README*', 'release': 'patch'}]}
        assert classify([_c('docs(README.md): fix')], config) == ReleaseType.PATCH
        assert classify([_c('docs(guide): fix')], config) == ReleaseType.NONE

    def test_custom_rule_release_false(self) -> None:
        """release = false silences a type."""
        config = {'release_rules': [{'type': 'feat', 'scope': 'internal', 'release': False}]}
        assert classify([_c('feat(internal): x')], config) == ReleaseType.NONE
        assert classify([_c('feat(public): x')], config) == ReleaseType.MINOR

    def test_custom_rules_highest_match(self) -> None:
        """Among matching custom rules, the highest release wins."""
        config = {
            'release_rules': [
                {'type': 'refactor', 'release': 'patch'},
                {'type': 'refactor', 'scope': 'core', 'release': 'minor'},
            ],
        }
        assert classify([_c('refactor(core): x')], config) == ReleaseType.MINOR

    def test_unknown_key(self) -> None:
        """Unknown config keys are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            classify([_c('feat: x')], {'presets': 'angular'})
        assert exc_info.value.code == E.CONFIG_INVALID_KEY

    def test_unknown_preset(self) -> None:
        """Unknown presets are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            classify([_c('feat: x')], {'preset': 'eslint'})
        assert exc_info.value.code == E.CONFIG_INVALID_VALUE

    def test_bad_release_value(self) -> None:
        """A release value outside the known types is rejected."""
        with pytest.raises(ConfigurationError):
            classify([_c('feat: x')], {'release_rules': [{'type': 'feat', 'release': 'huge'}]})

    def test_rules_must_be_list(self) -> None:
        """release_rules must be a list."""
        with pytest.raises(ConfigurationError):
            classify([_c('feat: x')], {'release_rules': {'type': 'feat'}})


class TestMaxRelease:
    """Tests for max_release()."""

    def test_order(self) -> None:
        """Major > minor > patch > none."""
        assert max_release(ReleaseType.PATCH, ReleaseType.MINOR) == ReleaseType.MINOR
        assert max_release(ReleaseType.MAJOR, ReleaseType.NONE) == ReleaseType.MAJOR
        assert max_release(ReleaseType.NONE, ReleaseType.NONE) == ReleaseType.NONE
