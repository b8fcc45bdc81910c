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

"""Read-only access to the local git repository.

Used by the CLI to fill the :class:`~majorcap.context.RunContext`: the
last released version (highest semver tag merged into ``HEAD``) and the
commits made since that tag.

All methods are async; blocking subprocess calls are dispatched to
``asyncio.to_thread()``.
"""

from __future__ import annotations

import asyncio
import subprocess  # noqa: S404 - only for TimeoutExpired
from pathlib import Path

from majorcap._run import CommandResult, run_command
from majorcap.analyzer import Commit
from majorcap.errors import E, MajorCapError
from majorcap.logging import get_logger
from majorcap.versions import TagCandidate, TagSource, sort_candidates

log = get_logger('majorcap.vcs')

# Field and record separators for ``git log`` output.
_FS = '\x1f'
_RS = '\x1e'


class GitRepository:
    """The project's own git checkout.

    Args:
        repo_root: Path inside the git working tree.
    """

    def __init__(self, repo_root: Path) -> None:
        """Initialize with the repository root path."""
        self._root = repo_root

    def _git(self, *args: str) -> CommandResult:
        """Run a git command synchronously (called via to_thread)."""
        return run_command(['git', *args], cwd=self._root)

    async def _checked(self, *args: str) -> CommandResult:
        cmd_str = ' '.join(['git', *args])
        try:
            result = await asyncio.to_thread(self._git, *args)
        except subprocess.TimeoutExpired as exc:
            raise MajorCapError(
                E.GIT_COMMAND_FAILED,
                f'{cmd_str} timed out after {exc.timeout}s',
                hint='Check for a stale git lock or a very large history.',
            ) from exc
        except OSError as exc:
            # FileNotFoundError: git missing from PATH, or repo_root gone.
            raise MajorCapError(
                E.GIT_COMMAND_FAILED,
                f'{cmd_str} could not be started: {exc}',
                hint='Install git and run majorcap from inside the project git checkout.',
            ) from exc
        if not result.ok:
            raise MajorCapError(
                E.GIT_COMMAND_FAILED,
                f'{result.command_str} failed: {result.stderr.strip() or result.return_code}',
                hint='Run majorcap from inside the project git checkout.',
            )
        return result

    async def last_release_tag(self) -> TagCandidate | None:
        """Return the highest semver tag reachable from ``HEAD``, or ``None``."""
        result = await self._checked('tag', '--merged', 'HEAD')
        candidates = sort_candidates(result.stdout.split(), source=TagSource.TAG)
        if not candidates:
            log.info('no_previous_release')
            return None
        log.debug('last_release_tag', tag=candidates[0].name)
        return candidates[0]

    async def commits_since(self, tag: str | None = None) -> list[Commit]:
        """Return the commits after ``tag`` (all of history when ``None``), newest first."""
        args = ['log', f'--format=%H{_FS}%B{_RS}']
        if tag:
            args.append(f'{tag}..HEAD')
        result = await self._checked(*args)
        commits: list[Commit] = []
        for record in result.stdout.split(_RS):
            record = record.strip('\n')
            if not record:
                continue
            sha, _, message = record.partition(_FS)
            header, _, body = message.strip().partition('\n')
            commits.append(Commit(header=header.strip(), body=body.strip(), hash=sha))
        return commits


__all__ = [
    'GitRepository',
]
