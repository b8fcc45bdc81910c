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

"""Structured error system for majorcap.

Every error has a unique ``MC-NAMED-KEY`` code, a human-readable message,
and an optional hint with a suggested fix.

Key Concepts (ELI5)::

    ┌─────────────────────────────┬────────────────────────────────────────┐
    │ Concept                     │ ELI5 Explanation                       │
    ├─────────────────────────────┼────────────────────────────────────────┤
    │ ErrorCode                   │ A named ID like "MC-UPSTREAM-NOT-FOUND"│
    │                             │ for each failure. Readable at a glance.│
    ├─────────────────────────────┼────────────────────────────────────────┤
    │ MajorCapError               │ The base exception. Carries the code,  │
    │                             │ the message and a fix suggestion.      │
    ├─────────────────────────────┼────────────────────────────────────────┤
    │ UpstreamFetchError          │ We could not reach the hosting API.    │
    ├─────────────────────────────┼────────────────────────────────────────┤
    │ UpstreamDataError           │ The API answered, but with an error    │
    │                             │ status or a payload we can't read.     │
    ├─────────────────────────────┼────────────────────────────────────────┤
    │ BranchCompareTransientError │ One tag/branch comparison failed. The  │
    │                             │ resolver logs it and moves on.         │
    ├─────────────────────────────┼────────────────────────────────────────┤
    │ MajorCapExceededError       │ The next major would jump ahead of     │
    │                             │ upstream. The release is blocked.      │
    └─────────────────────────────┴────────────────────────────────────────┘

Code categories::

    MC-CONFIG-*       Configuration errors
    MC-UPSTREAM-*     Hosting API errors for the tag/release listing
    MC-BRANCH-*       Per-candidate branch comparison errors
    MC-MAJOR-*        Gate errors
    MC-GIT-*          Local git errors

Usage::

    from majorcap.errors import ConfigurationError, E

    raise ConfigurationError(
        code=E.CONFIG_MISSING_REQUIRED,
        message='Missing required config "repo".',
        hint='Set repo = "owner/name" in majorcap.toml.',
    )
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from rich.console import Console
from rich.markup import escape as rich_escape


class ErrorCode(str, Enum):
    """Enumeration of all majorcap diagnostic codes."""

    # Configuration
    CONFIG_MISSING_REQUIRED = 'MC-CONFIG-MISSING-REQUIRED'
    CONFIG_INVALID_KEY = 'MC-CONFIG-INVALID-KEY'
    CONFIG_INVALID_VALUE = 'MC-CONFIG-INVALID-VALUE'
    CONFIG_PARSE_ERROR = 'MC-CONFIG-PARSE-ERROR'

    # Upstream listing
    UPSTREAM_UNREACHABLE = 'MC-UPSTREAM-UNREACHABLE'
    UPSTREAM_AUTH_FAILED = 'MC-UPSTREAM-AUTH-FAILED'
    UPSTREAM_FORBIDDEN = 'MC-UPSTREAM-FORBIDDEN'
    UPSTREAM_RATE_LIMITED = 'MC-UPSTREAM-RATE-LIMITED'
    UPSTREAM_NOT_FOUND = 'MC-UPSTREAM-NOT-FOUND'
    UPSTREAM_HTTP_ERROR = 'MC-UPSTREAM-HTTP-ERROR'
    UPSTREAM_BAD_PAYLOAD = 'MC-UPSTREAM-BAD-PAYLOAD'

    # Branch reachability
    BRANCH_COMPARE_FAILED = 'MC-BRANCH-COMPARE-FAILED'

    # Gate
    MAJOR_CAP_EXCEEDED = 'MC-MAJOR-CAP-EXCEEDED'

    # Local repository
    GIT_COMMAND_FAILED = 'MC-GIT-COMMAND-FAILED'


# Convenience alias for shorter imports.
E = ErrorCode


@dataclass(frozen=True)
class ErrorInfo:
    """Metadata for a single error code.

    Attributes:
        code: The ``MC-NAMED-KEY`` error code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    code: ErrorCode
    message: str
    hint: str = ''


class MajorCapError(Exception):
    """Base exception for all majorcap errors.

    Args:
        code: The error code from :class:`ErrorCode`.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    def __init__(self, code: ErrorCode, message: str, hint: str = '') -> None:
        """Initialize with an error code, message, and optional hint."""
        self.info = ErrorInfo(code=code, message=message, hint=hint)
        super().__init__(f'[{code.value}] {message}')

    @property
    def code(self) -> ErrorCode:
        """The error code."""
        return self.info.code

    @property
    def message(self) -> str:
        """The human-readable message without the code prefix."""
        return self.info.message

    @property
    def hint(self) -> str:
        """Suggestion for fixing this error, or empty string."""
        return self.info.hint


class ConfigurationError(MajorCapError):
    """Required configuration is missing or malformed.

    Raised before any network activity and never retried.
    """


class UpstreamFetchError(MajorCapError):
    """Transport-level failure (DNS, connection, timeout) reaching the hosting API."""

    def __init__(self, message: str, hint: str = '') -> None:
        """Initialize with the ``MC-UPSTREAM-UNREACHABLE`` code."""
        super().__init__(E.UPSTREAM_UNREACHABLE, message, hint)


class UpstreamDataError(MajorCapError):
    """The hosting API answered with an error status or an unexpected payload.

    Args:
        code: One of the ``MC-UPSTREAM-*`` codes identifying the category
            (bad token, forbidden, rate limited, not found, ...).
        message: Human-readable description.
        hint: Optional suggestion.
        status: The HTTP status code, or ``None`` for payload errors.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        hint: str = '',
        *,
        status: int | None = None,
    ) -> None:
        """Initialize with a category code and the HTTP status."""
        super().__init__(code, message, hint)
        self.status = status


class BranchCompareTransientError(MajorCapError):
    """A single tag-to-branch comparison failed.

    Never fatal: the resolver logs it and skips the candidate.
    """

    def __init__(self, tag: str, branch: str, reason: str) -> None:
        """Initialize with the tag, the branch and the failure reason."""
        super().__init__(
            E.BRANCH_COMPARE_FAILED,
            f'Could not compare {tag!r} with branch {branch!r}: {reason}',
        )
        self.tag = tag
        self.branch = branch


class MajorCapExceededError(MajorCapError):
    """The candidate next major version is above the upstream cap.

    The message names the attempted major, the cap and the upstream
    repository (and branch) so the failure reads on its own.
    """

    def __init__(self, next_major: int, cap: int, repo: str, branch: str | None = None) -> None:
        """Initialize from the attempted major, the cap and its provenance."""
        source = f'upstream repo: {repo}'
        if branch:
            source += f', branch: {branch}'
        super().__init__(
            E.MAJOR_CAP_EXCEEDED,
            f'Blocked: next major version {next_major} would exceed upstream major version cap of {cap} '
            f'(derived from {source}).',
            hint='Wait for upstream to publish the matching major version, or release a minor/patch instead.',
        )
        self.next_major = next_major
        self.cap = cap
        self.repo = repo
        self.branch = branch


ERRORS: dict[ErrorCode, ErrorInfo] = {
    E.CONFIG_MISSING_REQUIRED: ErrorInfo(
        code=E.CONFIG_MISSING_REQUIRED,
        message='A required configuration field is missing.',
        hint='Set repo = "owner/name" in majorcap.toml or pass --repo.',
    ),
    E.UPSTREAM_AUTH_FAILED: ErrorInfo(
        code=E.UPSTREAM_AUTH_FAILED,
        message='The hosting API rejected the token (401).',
        hint='The token is likely invalid, expired, or missing the repo scope.',
    ),
    E.UPSTREAM_RATE_LIMITED: ErrorInfo(
        code=E.UPSTREAM_RATE_LIMITED,
        message='The hosting API rate limit is exhausted.',
        hint='Provide a token (GITHUB_TOKEN) for a higher limit, or retry later.',
    ),
    E.UPSTREAM_NOT_FOUND: ErrorInfo(
        code=E.UPSTREAM_NOT_FOUND,
        message='The upstream repository was not found, or it is private.',
        hint="For private repositories, provide a token with 'repo' scope.",
    ),
    E.MAJOR_CAP_EXCEEDED: ErrorInfo(
        code=E.MAJOR_CAP_EXCEEDED,
        message='The next major version would exceed the upstream major version.',
        hint='Releases may reach parity with the upstream major but never exceed it.',
    ),
}


def explain(code: str) -> str | None:
    """Return a detailed explanation for an error code.

    Args:
        code: The error code string, e.g. ``"MC-UPSTREAM-NOT-FOUND"``.

    Returns:
        A formatted explanation string, or ``None`` if the code is unknown.
    """
    try:
        error_code = ErrorCode(code)
    except ValueError:
        return None

    info = ERRORS.get(error_code)
    if info is None:
        return f'{code}: No detailed explanation available.'

    lines = [f'{code}: {info.message}']
    if info.hint:
        lines.append(f'  Hint: {info.hint}')
    return '\n'.join(lines)


def render_error(exc: MajorCapError, *, file: TextIO | None = None) -> None:
    """Render an error in Rust-compiler style with color.

    Output format::

        error[MC-MAJOR-CAP-EXCEEDED]: Blocked: next major version 3 ...
          |
          = hint: Wait for upstream to publish the matching major version.

    Args:
        exc: The error to render.
        file: Output stream (defaults to ``sys.stderr``).
    """
    out = file or sys.stderr

    if out.isatty():
        console = Console(file=out, highlight=False)
        msg = rich_escape(exc.info.message)
        console.print(
            f'[bold red]error[/bold red][bold red]\\[{exc.code.value}][/bold red][bold]: {msg}[/bold]',
        )
        if exc.hint:
            hint = rich_escape(exc.hint)
            console.print('  [dim]|[/dim]')
            console.print(f'  [dim]=[/dim] [cyan]hint[/cyan]: {hint}')
        console.print()
    else:
        print(f'error[{exc.code.value}]: {exc.info.message}', file=out)  # noqa: T201 - CLI output
        if exc.hint:
            print('  |', file=out)  # noqa: T201 - CLI output
            print(f'  = hint: {exc.hint}', file=out)  # noqa: T201 - CLI output
        print(file=out)  # noqa: T201 - CLI output


__all__ = [
    'E',
    'ERRORS',
    'BranchCompareTransientError',
    'ConfigurationError',
    'ErrorCode',
    'ErrorInfo',
    'MajorCapError',
    'MajorCapExceededError',
    'UpstreamDataError',
    'UpstreamFetchError',
    'explain',
    'render_error',
]
