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

"""Read-only GitHub REST API client for upstream tag discovery.

Talks to three endpoints via ``httpx``::

    GET /repos/{owner}/{repo}/releases?per_page=100
    GET /repos/{owner}/{repo}/tags?per_page=100
    GET /repos/{owner}/{repo}/compare/{base}...{head}

Authentication:

    Resolves a token in order of precedence:

    1. ``token`` constructor parameter.
    2. ``GITHUB_TOKEN`` env var (set automatically by GitHub Actions).
    3. ``GH_TOKEN`` env var (used by the ``gh`` CLI).

    Unlike a forge backend that writes releases, a missing token is not
    an error here: public repositories can be read anonymously, at the
    cost of a much lower rate limit.

Error mapping for the listing calls:

    ┌──────────────────────────────┬─────────────────────────────────────┐
    │ Outcome                      │ Raised                              │
    ├──────────────────────────────┼─────────────────────────────────────┤
    │ DNS / connect / timeout      │ UpstreamFetchError                  │
    │ 401                          │ UpstreamDataError AUTH-FAILED       │
    │ 403, 429 + limit exhausted   │ UpstreamDataError RATE-LIMITED      │
    │ 403 otherwise                │ UpstreamDataError FORBIDDEN         │
    │ 404                          │ UpstreamDataError NOT-FOUND         │
    │ other non-2xx                │ UpstreamDataError HTTP-ERROR        │
    │ 2xx, unexpected JSON shape   │ UpstreamDataError BAD-PAYLOAD       │
    └──────────────────────────────┴─────────────────────────────────────┘

Usage::

    from majorcap.github import GitHubClient

    gh = GitHubClient('cli/cli')
    names = await gh.list_release_tags()
    status = await gh.compare('v2.0.0', 'trunk')
"""

from __future__ import annotations

import os
from typing import Any, Final
from urllib.parse import quote

import httpx

from majorcap.errors import E, UpstreamDataError, UpstreamFetchError
from majorcap.logging import get_logger
from majorcap.net import DEFAULT_POOL_SIZE, DEFAULT_TIMEOUT, http_client, request_with_retry

log = get_logger('majorcap.github')

_DEFAULT_BASE_URL = 'https://api.github.com'

# API version header for stable API behavior.
_API_VERSION = '2022-11-28'

# Hard cap on listing size. A single page is fetched; older records are
# never considered.
PAGE_SIZE: Final[int] = 100

# Compare statuses meaning "the base tag is reachable from the head branch".
REACHABLE_STATUSES: Final[frozenset[str]] = frozenset({'ahead', 'identical'})


def resolve_token(token: str | None = None) -> str:
    """Return the token to use: explicit > ``GITHUB_TOKEN`` > ``GH_TOKEN`` > ``''``."""
    return token or os.environ.get('GITHUB_TOKEN', '') or os.environ.get('GH_TOKEN', '')


class GitHubClient:
    """Read-only view of one GitHub repository.

    Args:
        repo: Repository in ``owner/name`` form.
        token: GitHub API token. Falls back to ``GITHUB_TOKEN`` or
            ``GH_TOKEN``; anonymous access when none is set.
        base_url: API base URL (override for GitHub Enterprise Server).
        pool_size: HTTP connection pool size.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        repo: str,
        *,
        token: str | None = None,
        base_url: str = _DEFAULT_BASE_URL,
        pool_size: int = DEFAULT_POOL_SIZE,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize with the repository and an optional token."""
        self._repo = repo
        self._base_url = base_url.rstrip('/')
        self._repo_url = f'{self._base_url}/repos/{repo}'
        self._pool_size = pool_size
        self._timeout = timeout

        resolved_token = resolve_token(token)
        self._authenticated = bool(resolved_token)
        self._headers = {
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': _API_VERSION,
        }
        if resolved_token:
            self._headers['Authorization'] = f'Bearer {resolved_token}'

    def __repr__(self) -> str:
        """Return a safe repr that never exposes the API token."""
        return f'GitHubClient(repo={self._repo!r}, authenticated={self._authenticated})'

    @property
    def repo(self) -> str:
        """The ``owner/name`` repository this client reads."""
        return self._repo

    async def list_release_tags(self) -> list[str]:
        """Return the ``tag_name`` of the most recent releases (at most 100)."""
        records = await self._list('releases')
        return _extract_names(records, 'tag_name', self._repo, 'releases')

    async def list_tags(self) -> list[tuple[str, str]]:
        """Return ``(name, commit_sha)`` for the most recent tags (at most 100)."""
        records = await self._list('tags')
        names = _extract_names(records, 'name', self._repo, 'tags')
        shas = [_commit_sha(r) for r in records]
        return list(zip(names, shas))

    async def compare(self, base: str, head: str) -> str:
        """Return the compare status of ``head`` relative to ``base``.

        ``ahead`` means ``base`` is an ancestor of ``head``; ``identical``
        means they point at the same commit. Other values are ``behind``
        and ``diverged``.

        Raises:
            httpx.TransportError: On a transport failure.
            httpx.HTTPStatusError: On a non-success status.
            ValueError: If the payload carries no ``status`` string.
        """
        url = f'{self._repo_url}/compare/{quote(base, safe="/")}...{quote(head, safe="/")}'
        async with http_client(
            pool_size=self._pool_size,
            timeout=self._timeout,
            headers=self._headers,
        ) as client:
            response = await request_with_retry(client, 'GET', url)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            msg = f'compare response for {base}...{head} is not an object'
            raise ValueError(msg)
        status = payload.get('status')
        if not isinstance(status, str):
            msg = f'compare response for {base}...{head} has no status'
            raise ValueError(msg)
        log.debug('compare', base=base, head=head, status=status)
        return status

    async def _list(self, kind: str) -> list[Any]:
        """Fetch one page of a listing endpoint and validate its envelope."""
        url = f'{self._repo_url}/{kind}?per_page={PAGE_SIZE}'
        try:
            async with http_client(
                pool_size=self._pool_size,
                timeout=self._timeout,
                headers=self._headers,
            ) as client:
                response = await request_with_retry(client, 'GET', url)
        except httpx.TransportError as exc:
            raise UpstreamFetchError(
                f'Network error while attempting to fetch {kind} from {self._repo}: {str(exc) or type(exc).__name__}',
                hint='Check network connectivity to the GitHub API.',
            ) from exc

        if not response.is_success:
            raise self._status_error(kind, response)

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamDataError(
                E.UPSTREAM_BAD_PAYLOAD,
                f'Invalid JSON received from GitHub API when fetching {kind} for {self._repo}.',
                status=response.status_code,
            ) from exc

        if not isinstance(payload, list):
            raise UpstreamDataError(
                E.UPSTREAM_BAD_PAYLOAD,
                f'Invalid response format received from GitHub API when fetching {kind} for {self._repo}. '
                'Expected an array.',
                status=response.status_code,
            )

        log.debug('listed', repo=self._repo, kind=kind, count=len(payload))
        return payload[:PAGE_SIZE]

    def _status_error(self, kind: str, response: httpx.Response) -> UpstreamDataError:
        """Build a diagnostic for a non-success listing response."""
        status = response.status_code
        prefix = f'Failed to fetch {kind} from {self._repo} ({status} {response.reason_phrase}).'
        rate_exhausted = response.headers.get('x-ratelimit-remaining') == '0'

        if status == 401:
            code = E.UPSTREAM_AUTH_FAILED
            detail = "Authentication failed. The provided GitHub token is likely invalid, expired, or lacks 'repo' scope."
        elif status in (403, 429) and rate_exhausted:
            code = E.UPSTREAM_RATE_LIMITED
            detail = 'API rate limit exceeded.'
            if not self._authenticated:
                detail += ' Unauthenticated requests have a much lower limit; provide a GitHub token.'
        elif status == 403:
            code = E.UPSTREAM_FORBIDDEN
            detail = "Access forbidden. The provided GitHub token might lack required scopes (e.g., 'repo')."
        elif status == 404:
            code = E.UPSTREAM_NOT_FOUND
            if self._authenticated:
                detail = "Repository not found, or the provided GitHub token does not have 'repo' scope access to it."
            else:
                detail = (
                    'The repository was not found or it is private. '
                    "For private repositories, please provide a GitHub token with 'repo' scope."
                )
        elif status == 429:
            code = E.UPSTREAM_RATE_LIMITED
            detail = 'Too many requests. Retry later.'
        else:
            code = E.UPSTREAM_HTTP_ERROR
            detail = 'Please check repository name, token permissions, and GitHub status page.'

        return UpstreamDataError(code, f'{prefix} {detail}', status=status)


def _extract_names(records: list[Any], field: str, repo: str, kind: str) -> list[str]:
    """Pull the tag name out of every record, rejecting malformed payloads."""
    names: list[str] = []
    for record in records:
        name = record.get(field) if isinstance(record, dict) else None
        if not isinstance(name, str):
            raise UpstreamDataError(
                E.UPSTREAM_BAD_PAYLOAD,
                f'Invalid response format received from GitHub API when fetching {kind} for {repo}. '
                f"Expected an array of objects with '{field}' strings.",
            )
        names.append(name)
    return names


def _commit_sha(record: dict[str, Any]) -> str:
    """Return ``record.commit.sha`` for a tag record, or empty string."""
    commit = record.get('commit')
    if isinstance(commit, dict) and isinstance(commit.get('sha'), str):
        return commit['sha']
    return ''


__all__ = [
    'PAGE_SIZE',
    'REACHABLE_STATUSES',
    'GitHubClient',
    'resolve_token',
]
