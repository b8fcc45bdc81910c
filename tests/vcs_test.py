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

"""Tests for the local git repository reader.

Mocks _git to avoid real git calls.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from majorcap._run import CommandResult, run_command
from majorcap.analyzer import Commit
from majorcap.errors import E, MajorCapError
from majorcap.logging import configure_logging
from majorcap.vcs import GitRepository

configure_logging(quiet=True)


def _ok(stdout: str = '', **kw: Any) -> CommandResult:  # noqa: ANN401
    return CommandResult(command=['git'], return_code=0, stdout=stdout, **kw)


def _fail(stderr: str = '', **kw: Any) -> CommandResult:  # noqa: ANN401
    return CommandResult(command=['git', 'tag'], return_code=128, stderr=stderr, **kw)


@pytest.fixture()
def repo() -> GitRepository:
    """Repository rooted at a fake path."""
    return GitRepository(Path('/fake/repo'))


class TestLastReleaseTag:
    """Tests for last_release_tag()."""

    @pytest.mark.asyncio()
    async def test_highest_semver(self, repo: GitRepository) -> None:
        """The highest semver tag wins, non-semver tags are ignored."""
        with patch.object(repo, '_git', return_value=_ok('v1.2.0\nv1.10.0\nnightly\nv1.9.3\n')) as m:
            tag = await repo.last_release_tag()
        assert tag is not None
        assert tag.name == 'v1.10.0'
        assert str(tag.version) == '1.10.0'
        m.assert_called_once_with('tag', '--merged', 'HEAD')

    @pytest.mark.asyncio()
    async def test_no_tags(self, repo: GitRepository) -> None:
        """A never-released project has no last tag."""
        with patch.object(repo, '_git', return_value=_ok('')):
            assert await repo.last_release_tag() is None

    @pytest.mark.asyncio()
    async def test_git_failure(self, repo: GitRepository) -> None:
        """A failing git command raises MajorCapError."""
        with patch.object(repo, '_git', return_value=_fail('fatal: not a git repository')):
            with pytest.raises(MajorCapError) as exc_info:
                await repo.last_release_tag()
        assert exc_info.value.code == E.GIT_COMMAND_FAILED
        assert 'not a git repository' in exc_info.value.message

    @pytest.mark.asyncio()
    async def test_git_not_installed(self, repo: GitRepository) -> None:
        """A missing git executable raises MajorCapError, not OSError."""
        with patch.object(repo, '_git', side_effect=FileNotFoundError(2, 'No such file or directory', 'git')):
            with pytest.raises(MajorCapError) as exc_info:
                await repo.last_release_tag()
        assert exc_info.value.code == E.GIT_COMMAND_FAILED
        assert 'could not be started' in exc_info.value.message
        assert exc_info.value.hint

    @pytest.mark.asyncio()
    async def test_git_timeout(self, repo: GitRepository) -> None:
        """A hung git command raises MajorCapError naming the timeout."""
        with patch.object(repo, '_git', side_effect=subprocess.TimeoutExpired(['git', 'log'], 60)):
            with pytest.raises(MajorCapError) as exc_info:
                await repo.commits_since('v1.0.0')
        assert exc_info.value.code == E.GIT_COMMAND_FAILED
        assert 'timed out after 60s' in exc_info.value.message


class TestCommitsSince:
    """Tests for commits_since()."""

    @pytest.mark.asyncio()
    async def test_parses_records(self, repo: GitRepository) -> None:
        """Hash, header and body are split out of the log output."""
        stdout = (
            'aaa111\x1ffeat!: drop legacy api\n\nBREAKING CHANGE: removed /v1\n\x1e\n'
            'bbb222\x1ffix: typo\n\x1e\n'
        )
        with patch.object(repo, '_git', return_value=_ok(stdout)) as m:
            commits = await repo.commits_since('v1.0.0')
        assert commits == [
            Commit(header='feat!: drop legacy api', body='BREAKING CHANGE: removed /v1', hash='aaa111'),
            Commit(header='fix: typo', body='', hash='bbb222'),
        ]
        args = m.call_args.args
        assert args[0] == 'log'
        assert args[-1] == 'v1.0.0..HEAD'

    @pytest.mark.asyncio()
    async def test_whole_history(self, repo: GitRepository) -> None:
        """Without a tag the whole history is read."""
        with patch.object(repo, '_git', return_value=_ok('')) as m:
            assert await repo.commits_since(None) == []
        assert not any('..HEAD' in a for a in m.call_args.args)


class TestRunCommand:
    """Tests for run_command()."""

    def test_success(self) -> None:
        """A zero exit code is ok."""
        completed = subprocess.CompletedProcess(args=['git'], returncode=0, stdout='out', stderr='')
        with patch('majorcap._run.subprocess.run', return_value=completed) as m:
            result = run_command(['git', 'status'], cwd='/tmp')
        assert result.ok
        assert result.stdout == 'out'
        assert result.command_str == 'git status'
        assert m.call_args.kwargs['cwd'] == '/tmp'

    def test_failure_is_returned(self) -> None:
        """A non-zero exit code is returned, not raised."""
        completed = subprocess.CompletedProcess(args=['git'], returncode=1, stdout='', stderr='boom')
        with patch('majorcap._run.subprocess.run', return_value=completed):
            result = run_command(['git', 'log'])
        assert not result.ok
        assert result.stderr == 'boom'

    def test_timeout_propagates(self) -> None:
        """A timeout is re-raised."""
        with patch('majorcap._run.subprocess.run', side_effect=subprocess.TimeoutExpired(['git'], 1)):
            with pytest.raises(subprocess.TimeoutExpired):
                run_command(['git', 'fetch'], timeout=1)
