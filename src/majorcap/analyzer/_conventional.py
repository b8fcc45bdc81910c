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

"""Conventional Commits classifier.

Maps commits to a release verdict with the familiar default rules::

    BREAKING CHANGE (or ``!``)  →  major
    revert                      →  patch
    feat:                       →  minor
    fix:, perf:                 →  patch
    docs:, chore:, ci:, etc.    →  none

Configuration (all optional)::

    preset        = "conventionalcommits"   # or "angular" (no "!" marker)
    release_rules = [
        { type = "docs", scope = "README*", release = "patch" },
        { type = "refactor", release = false },
    ]

Custom ``release_rules`` are checked first; when at least one matches a
commit, the highest matching ``release`` wins and the default rules are
not consulted for that commit.
"""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from majorcap.analyzer._types import Commit, ReleaseType, max_release
from majorcap.errors import E, ConfigurationError

DEFAULT_PRESET = 'conventionalcommits'
ALLOWED_PRESETS: frozenset[str] = frozenset({'conventionalcommits', 'angular'})
VALID_CONFIG_KEYS: frozenset[str] = frozenset({'preset', 'release_rules'})

# Regex for Conventional Commits: type(scope)!: description
CC_PATTERN: re.Pattern[str] = re.compile(
    r'^(?P<type>[A-Za-z]+)'
    r'(?:\((?P<scope>[^)]*)\))?'
    r'(?P<breaking>!)?'
    r':\s*'
    r'(?P<subject>.+)$',
)

# GitHub's default revert format: Revert "feat: add X"
REVERT_PATTERN: re.Pattern[str] = re.compile(r'^[Rr]evert\s+"(?P<inner>.+)"')

BREAKING_NOTE_PATTERN: re.Pattern[str] = re.compile(r'^BREAKING[ -]CHANGE:', re.MULTILINE)

SKIP_RELEASE_PATTERN: re.Pattern[str] = re.compile(r'\[(?:skip release|release skip)\]', re.IGNORECASE)


@dataclass(frozen=True)
class ParsedHeader:
    """The parts of a commit the release rules look at."""

    type: str = ''
    scope: str = ''
    breaking: bool = False
    revert: bool = False


@dataclass(frozen=True)
class ReleaseRule:
    """One entry of ``release_rules``.

    Unset fields (``None``) match anything. ``scope`` is a glob.
    """

    release: ReleaseType
    type: str | None = None
    scope: str | None = None
    breaking: bool | None = None
    revert: bool | None = None

    def matches(self, parsed: ParsedHeader) -> bool:
        """Return ``True`` if every set field agrees with ``parsed``."""
        if self.type is not None and self.type != parsed.type:
            return False
        if self.scope is not None and not (parsed.scope and fnmatch.fnmatch(parsed.scope, self.scope)):
            return False
        if self.breaking is not None and self.breaking != parsed.breaking:
            return False
        return self.revert is None or self.revert == parsed.revert


DEFAULT_RELEASE_RULES: tuple[ReleaseRule, ...] = (
    ReleaseRule(release=ReleaseType.MAJOR, breaking=True),
    ReleaseRule(release=ReleaseType.PATCH, revert=True),
    ReleaseRule(release=ReleaseType.MINOR, type='feat'),
    ReleaseRule(release=ReleaseType.PATCH, type='fix'),
    ReleaseRule(release=ReleaseType.PATCH, type='perf'),
)


def parse_header(commit: Commit, *, preset: str = DEFAULT_PRESET) -> ParsedHeader:
    """Extract type, scope, breaking and revert flags from a commit."""
    header = commit.header.strip()
    breaking = bool(BREAKING_NOTE_PATTERN.search(commit.body))

    if REVERT_PATTERN.match(header):
        return ParsedHeader(type='revert', revert=True, breaking=breaking)

    match = CC_PATTERN.match(header)
    if not match:
        return ParsedHeader(breaking=breaking)

    cc_type = match.group('type').lower()
    if preset == 'conventionalcommits' and match.group('breaking'):
        breaking = True
    return ParsedHeader(
        type=cc_type,
        scope=match.group('scope') or '',
        breaking=breaking,
        revert=cc_type == 'revert',
    )


def parse_release_rules(raw: Any) -> tuple[ReleaseRule, ...]:  # noqa: ANN401 - dynamic config
    """Validate ``release_rules`` from user config."""
    if not isinstance(raw, list):
        raise ConfigurationError(
            E.CONFIG_INVALID_VALUE,
            f"'release_rules' must be a list of tables, got {type(raw).__name__}",
        )
    rules: list[ReleaseRule] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, Mapping) or 'release' not in entry:
            raise ConfigurationError(
                E.CONFIG_INVALID_VALUE,
                f'release_rules[{index}] must be a table with a "release" key',
                hint='Example: { type = "docs", release = "patch" }',
            )
        release = entry['release']
        if release is False:
            release_type = ReleaseType.NONE
        else:
            try:
                release_type = ReleaseType(release)
            except ValueError as exc:
                raise ConfigurationError(
                    E.CONFIG_INVALID_VALUE,
                    f'release_rules[{index}].release must be "major", "minor", "patch" or false, got {release!r}',
                ) from exc
        rules.append(
            ReleaseRule(
                release=release_type,
                type=entry.get('type'),
                scope=entry.get('scope'),
                breaking=entry.get('breaking'),
                revert=entry.get('revert'),
            ),
        )
    return tuple(rules)


class ConventionalCommitClassifier:
    """Default :class:`~majorcap.analyzer.CommitClassifier`.

    Classifies `Conventional Commits <https://www.conventionalcommits.org/>`_
    with optional custom release rules.
    """

    def classify(self, commits: Sequence[Commit], config: Mapping[str, Any]) -> ReleaseType:
        """Return the strongest release type over ``commits``."""
        unknown = sorted(set(config) - VALID_CONFIG_KEYS)
        if unknown:
            raise ConfigurationError(
                E.CONFIG_INVALID_KEY,
                f'Unknown commit_analyzer_config key(s): {", ".join(unknown)}',
                hint=f'Valid keys: {sorted(VALID_CONFIG_KEYS)}',
            )
        preset = config.get('preset', DEFAULT_PRESET)
        if preset not in ALLOWED_PRESETS:
            raise ConfigurationError(
                E.CONFIG_INVALID_VALUE,
                f'preset must be one of {sorted(ALLOWED_PRESETS)}, got {preset!r}',
            )
        custom_rules = parse_release_rules(config['release_rules']) if 'release_rules' in config else ()

        verdict = ReleaseType.NONE
        for commit in commits:
            if SKIP_RELEASE_PATTERN.search(commit.message):
                continue
            parsed = parse_header(commit, preset=preset)
            verdict = max_release(verdict, self._release_for(parsed, custom_rules))
            if verdict == ReleaseType.MAJOR:
                break
        return verdict

    @staticmethod
    def _release_for(parsed: ParsedHeader, custom_rules: tuple[ReleaseRule, ...]) -> ReleaseType:
        """Apply custom rules first, then the defaults."""
        for rules in (custom_rules, DEFAULT_RELEASE_RULES):
            matched = [rule.release for rule in rules if rule.matches(parsed)]
            if matched:
                result = ReleaseType.NONE
                for release in matched:
                    result = max_release(result, release)
                return result
        return ReleaseType.NONE
