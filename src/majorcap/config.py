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

"""Configuration loading and validation for majorcap.

Looks for, in order:

1. ``majorcap.toml`` at the project root (top-level keys).
2. The ``[tool.majorcap]`` table of ``pyproject.toml``.

Validation Pipeline::

    majorcap.toml
    ┌──────────────────┐
    │ brnach = "main"  │  ← typo!
    └────────┬─────────┘
             │
             ▼
    ┌──────────────────┐     ┌──────────────────────────────┐
    │ 1. Unknown key   │────→│ MC-CONFIG-INVALID-KEY:       │
    │    detection     │     │ hint: "Did you mean          │
    └────────┬─────────┘     │       'branch'?"             │
             │               └──────────────────────────────┘
             ▼
    ┌──────────────────┐     ┌──────────────────────────────┐
    │ 2. Type check    │────→│ MC-CONFIG-INVALID-VALUE:     │
    │    each value    │     │ 'repo' must be str, got int  │
    └────────┬─────────┘     └──────────────────────────────┘
             │
             ▼
    ┌──────────────────┐
    │ PluginConfig()   │  ← frozen dataclass
    └────────┬─────────┘
             │  validate_config() right before the hooks run
             ▼
    ┌──────────────────┐     ┌──────────────────────────────┐
    │ 3. Required      │────→│ MC-CONFIG-MISSING-REQUIRED   │
    │    fields        │     │ Missing required config      │
    └──────────────────┘     │ "repo".                      │
                             └──────────────────────────────┘

Supported keys::

    repo                   = "owner/name"         # required
    branch                 = "main"               # scope the cap to a branch
    github_token           = "..."                # prefer GITHUB_TOKEN instead
    source                 = "releases"           # or "tags"
    timeout                = 30                   # seconds per HTTP request
    [commit_analyzer_config]                      # passed to the classifier
    preset                 = "conventionalcommits"
"""

from __future__ import annotations

import dataclasses
import difflib
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomlkit
import tomlkit.exceptions

from majorcap.errors import E, ConfigurationError
from majorcap.logging import get_logger
from majorcap.net import DEFAULT_TIMEOUT
from majorcap.versions import TagSource

logger = get_logger(__name__)

CONFIG_FILENAME = 'majorcap.toml'
PYPROJECT_FILENAME = 'pyproject.toml'

VALID_KEYS: frozenset[str] = frozenset({
    'branch',
    'commit_analyzer_config',
    'github_token',
    'repo',
    'source',
    'timeout',
})

ALLOWED_SOURCES: dict[str, TagSource] = {
    'releases': TagSource.RELEASE,
    'tags': TagSource.TAG,
}

_REPO_RE = re.compile(r'^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$')

_TYPE_MAP: dict[str, type | tuple[type, ...]] = {
    'repo': str,
    'branch': str,
    'github_token': str,
    'source': str,
    'timeout': (int, float),
    'commit_analyzer_config': dict,
}


@dataclass(frozen=True)
class PluginConfig:
    """Validated majorcap configuration.

    Attributes:
        repo: Upstream repository in ``owner/name`` form.
        branch: Upstream branch to scope the cap to; empty for none.
        github_token: Explicit GitHub token; empty to fall back to the
            environment.
        source: ``"releases"`` or ``"tags"``.
        timeout: Per-request HTTP timeout in seconds.
        commit_analyzer_config: Passed verbatim to the commit classifier;
            empty means the conventional-commits default.
        config_path: File the configuration was read from, if any.
    """

    repo: str = ''
    branch: str = ''
    github_token: str = ''
    source: str = 'releases'
    timeout: float = DEFAULT_TIMEOUT
    commit_analyzer_config: dict[str, Any] = field(default_factory=dict)
    config_path: Path | None = None

    @property
    def tag_source(self) -> TagSource:
        """The listing to read, as a :class:`TagSource`."""
        return ALLOWED_SOURCES[self.source]

    def with_overrides(self, **overrides: Any) -> PluginConfig:  # noqa: ANN401 - CLI values
        """Return a copy with every non-empty override applied."""
        changes = {key: value for key, value in overrides.items() if value not in (None, '')}
        for key, value in changes.items():
            _validate_value(key, value, context='command line')
        return dataclasses.replace(self, **changes)

    def __repr__(self) -> str:
        """Return a repr that never exposes the token."""
        return (
            f'PluginConfig(repo={self.repo!r}, branch={self.branch!r}, source={self.source!r}, '
            f'token={"set" if self.github_token else "unset"})'
        )


def _validate_value(key: str, value: Any, *, context: str) -> None:  # noqa: ANN401 - dynamic config
    """Raise if a config value has the wrong type or an unknown enum value."""
    expected = _TYPE_MAP.get(key)
    if expected is None:
        return
    if isinstance(value, bool) or not isinstance(value, expected):
        type_name = expected.__name__ if isinstance(expected, type) else 'number'
        raise ConfigurationError(
            E.CONFIG_INVALID_VALUE,
            f"'{key}' must be {type_name}, got {type(value).__name__}",
            hint=f'Check the value of {key} in {context}.',
        )
    if key == 'source' and value not in ALLOWED_SOURCES:
        raise ConfigurationError(
            E.CONFIG_INVALID_VALUE,
            f"source must be one of {sorted(ALLOWED_SOURCES)}, got '{value}'",
            hint="Use 'releases' to read published releases or 'tags' for raw git tags.",
        )
    if key == 'timeout' and value <= 0:
        raise ConfigurationError(
            E.CONFIG_INVALID_VALUE,
            f'timeout must be positive, got {value}',
        )


def parse_config(raw: dict[str, Any], *, context: str = CONFIG_FILENAME, config_path: Path | None = None) -> PluginConfig:
    """Validate a raw mapping and build a :class:`PluginConfig`.

    Args:
        raw: Plain mapping (already unwrapped from TOML).
        context: Where the mapping came from, for hints.
        config_path: File the mapping was read from.

    Raises:
        ConfigurationError: On unknown keys or wrong value types.
    """
    for key in raw:
        if key not in VALID_KEYS:
            suggestion = difflib.get_close_matches(key, VALID_KEYS, n=1, cutoff=0.6)
            hint = f"Did you mean '{suggestion[0]}'?" if suggestion else f'Valid keys: {sorted(VALID_KEYS)}'
            raise ConfigurationError(
                E.CONFIG_INVALID_KEY,
                f"Unknown key '{key}' in {context}",
                hint=hint,
            )
    for key, value in raw.items():
        _validate_value(key, value, context=context)

    if raw.get('github_token'):
        logger.warning(
            'token_in_config_file',
            path=str(config_path or context),
            hint='Prefer the GITHUB_TOKEN environment variable over committing a token.',
        )
    return PluginConfig(**raw, config_path=config_path)


def _read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file into plain Python objects."""
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as exc:
        raise ConfigurationError(
            E.CONFIG_PARSE_ERROR,
            f'Failed to read {path}: {exc}',
        ) from exc
    try:
        return tomlkit.parse(text).unwrap()
    except tomlkit.exceptions.TOMLKitError as exc:
        raise ConfigurationError(
            E.CONFIG_PARSE_ERROR,
            f'Failed to parse {path}: {exc}',
        ) from exc


def load_config(project_root: Path) -> PluginConfig:
    """Load configuration from ``majorcap.toml`` or ``pyproject.toml``.

    Returns an empty :class:`PluginConfig` when neither file configures
    majorcap; :func:`validate_config` then reports what is missing.

    Args:
        project_root: Directory containing the configuration file.

    Raises:
        ConfigurationError: If the file is unreadable or invalid.
    """
    config_path = project_root / CONFIG_FILENAME
    if config_path.is_file():
        return parse_config(_read_toml(config_path), context=CONFIG_FILENAME, config_path=config_path)

    pyproject = project_root / PYPROJECT_FILENAME
    if pyproject.is_file():
        tool = _read_toml(pyproject).get('tool', {})
        if not isinstance(tool, dict):
            raise ConfigurationError(
                E.CONFIG_INVALID_VALUE,
                f'[tool] in pyproject.toml must be a table, got {type(tool).__name__}',
            )
        section = tool.get('majorcap')
        if section is not None:
            if not isinstance(section, dict):
                raise ConfigurationError(
                    E.CONFIG_INVALID_VALUE,
                    f'[tool.majorcap] must be a table, got {type(section).__name__}',
                )
            return parse_config(section, context='[tool.majorcap] in pyproject.toml', config_path=pyproject)

    logger.debug('no_majorcap_config', path=str(project_root))
    return PluginConfig()


def validate_config(config: PluginConfig) -> None:
    """Check the required fields before any network activity.

    Args:
        config: Configuration to check.

    Raises:
        ConfigurationError: If ``repo`` is missing or not in
            ``owner/name`` form.
    """
    if not config.repo:
        raise ConfigurationError(
            E.CONFIG_MISSING_REQUIRED,
            'Missing required config "repo".',
            hint='Set repo = "owner/name" in majorcap.toml or pass --repo.',
        )
    if not _REPO_RE.match(config.repo):
        raise ConfigurationError(
            E.CONFIG_INVALID_VALUE,
            f'repo must be in "owner/name" form, got {config.repo!r}',
            hint='Example: repo = "cli/cli"',
        )


__all__ = [
    'ALLOWED_SOURCES',
    'CONFIG_FILENAME',
    'VALID_KEYS',
    'PluginConfig',
    'load_config',
    'parse_config',
    'validate_config',
]
