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

"""Upstream major version cap resolution.

Turns an upstream repository's published tags into a single integer:
the highest major version that upstream has actually released.

Resolution pipeline::

    list releases/tags (one page, ≤100)
            │
            ▼
    keep semver-valid names ──→ "latest", "docs-2024" dropped silently
            │
            ▼
    sort by semver precedence, highest first
            │
            ├── no branch ──→ cap = major(first) or 0
            │
            └── branch ────→ for each candidate, highest first:
                                compare(tag...branch)
                                  ahead / identical → cap = major(tag), stop
                                  behind / diverged → next candidate
                                  request failed    → log, next candidate
                             none qualified → cap = 0

An upstream with no qualifying tag yields cap 0. That is not an error:
it blocks every major bump until upstream publishes one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from majorcap.errors import BranchCompareTransientError
from majorcap.github import REACHABLE_STATUSES, GitHubClient
from majorcap.logging import get_logger
from majorcap.net import DEFAULT_TIMEOUT
from majorcap.versions import TagCandidate, TagSource, sort_candidates

logger = get_logger(__name__)


@runtime_checkable
class UpstreamSource(Protocol):
    """What the resolver needs from a hosting API.

    :class:`~majorcap.github.GitHubClient` is the production
    implementation; tests use an in-memory fake.
    """

    @property
    def repo(self) -> str:
        """The ``owner/name`` repository."""
        ...

    async def list_release_tags(self) -> list[str]:
        """Tag names of the most recent releases."""
        ...

    async def list_tags(self) -> list[tuple[str, str]]:
        """``(name, sha)`` of the most recent tags."""
        ...

    async def compare(self, base: str, head: str) -> str:
        """Compare status of ``head`` relative to ``base``."""
        ...


@dataclass(frozen=True)
class CapResolution:
    """Outcome of a cap resolution.

    Attributes:
        cap: The upstream major version ceiling (``0`` if no evidence).
        tag: The tag the cap was derived from, or ``None``.
        repo: Upstream repository the cap came from.
        branch: Branch the candidates were scoped to, if any.
        source: Listing the candidates came from.
        candidates: Number of semver-valid candidates considered.
    """

    cap: int
    tag: str | None
    repo: str
    branch: str | None = None
    source: TagSource = TagSource.RELEASE
    candidates: int = 0


async def resolve_major_cap(
    repo: str,
    branch: str | None = None,
    token: str | None = None,
    *,
    source: TagSource = TagSource.RELEASE,
    client: UpstreamSource | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> CapResolution:
    """Resolve the upstream major version cap for ``repo``.

    Args:
        repo: Upstream repository in ``owner/name`` form.
        branch: When set, only tags reachable from this branch count.
        token: Optional GitHub token (see :func:`majorcap.github.resolve_token`).
        source: Read the releases listing (default) or the raw tags listing.
        client: Hosting API client; built from ``repo``/``token`` when omitted.
        timeout: Per-request timeout in seconds.

    Returns:
        A :class:`CapResolution`; ``cap`` is ``0`` when nothing qualifies.

    Raises:
        UpstreamFetchError: The listing request failed at the transport level.
        UpstreamDataError: The listing returned an error status or a bad payload.
    """
    if client is None:
        client = GitHubClient(repo, token=token, timeout=timeout)

    candidates = await fetch_candidates(client, source)
    logger.debug('upstream_candidates', repo=repo, source=source.value, count=len(candidates))

    if branch:
        winner = await first_on_branch(client, candidates, branch)
    else:
        winner = candidates[0] if candidates else None

    if winner is None:
        logger.info(
            'no_qualifying_upstream_tag',
            repo=repo,
            branch=branch,
            candidates=len(candidates),
            cap=0,
        )
        return CapResolution(cap=0, tag=None, repo=repo, branch=branch, source=source, candidates=len(candidates))

    logger.info('upstream_cap_resolved', repo=repo, branch=branch, tag=winner.name, cap=winner.major)
    return CapResolution(
        cap=winner.major,
        tag=winner.name,
        repo=repo,
        branch=branch,
        source=source,
        candidates=len(candidates),
    )


async def fetch_candidates(client: UpstreamSource, source: TagSource) -> list[TagCandidate]:
    """List the upstream names and return the semver ones, highest first."""
    if source == TagSource.TAG:
        pairs = await client.list_tags()
        return sort_candidates([name for name, _ in pairs], source=source, shas=dict(pairs))
    names = await client.list_release_tags()
    return sort_candidates(names, source=source)


async def first_on_branch(
    client: UpstreamSource,
    candidates: list[TagCandidate],
    branch: str,
) -> TagCandidate | None:
    """Return the highest candidate reachable from ``branch``, or ``None``.

    Comparisons are issued one at a time and stop at the first hit. A
    failed comparison only disqualifies that candidate. Candidates from
    the tags listing are compared by commit SHA; release candidates by
    tag name.
    """
    for candidate in candidates:
        try:
            status = await _compare(client, candidate, branch)
        except BranchCompareTransientError as exc:
            logger.warning(
                'branch_compare_skipped',
                code=exc.code.value,
                tag=candidate.name,
                branch=branch,
                error=exc.message,
            )
            continue

        if status in REACHABLE_STATUSES:
            return candidate
        logger.debug('tag_not_on_branch', tag=candidate.name, branch=branch, status=status)
    return None


async def _compare(client: UpstreamSource, candidate: TagCandidate, branch: str) -> str:
    """Compare ``candidate...branch``, folding request failures into one error type."""
    try:
        return await client.compare(candidate.sha or candidate.name, branch)
    except (httpx.HTTPError, ValueError) as exc:
        raise BranchCompareTransientError(candidate.name, branch, str(exc) or type(exc).__name__) from exc


__all__ = [
    'CapResolution',
    'UpstreamSource',
    'fetch_candidates',
    'first_on_branch',
    'resolve_major_cap',
]
