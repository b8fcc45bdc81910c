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

"""Major version gate.

Decision table::

    verdict   next major vs cap   result
    ───────   ─────────────────   ──────────────────────────────
    minor     (not computed)      minor
    patch     (not computed)      patch
    none      (not computed)      none
    major     next <= cap         major
    major     next >  cap         MajorCapExceededError
    major     unparsable version  major (warning logged)
"""

from __future__ import annotations

from majorcap.analyzer import ReleaseType
from majorcap.errors import MajorCapExceededError
from majorcap.logging import get_logger
from majorcap.versions import INITIAL_VERSION, next_major

logger = get_logger(__name__)


def evaluate(
    verdict: ReleaseType,
    last_version: str | None,
    cap: int,
    *,
    repo: str = '',
    branch: str | None = None,
) -> ReleaseType:
    """Let ``verdict`` through unless it would jump past the upstream cap.

    Args:
        verdict: Release type computed by the commit classifier.
        last_version: Last released version of this project; ``None``
            means it was never released.
        cap: Upstream major version cap.
        repo: Upstream repository the cap came from, for the error message.
        branch: Upstream branch the cap was scoped to, if any.

    Returns:
        ``verdict`` unchanged.

    Raises:
        MajorCapExceededError: If ``verdict`` is major and the next major
            version is greater than ``cap``.
    """
    if verdict != ReleaseType.MAJOR:
        logger.info('cap_check_not_applicable', release_type=verdict.value)
        return verdict

    current = last_version or INITIAL_VERSION
    attempted = next_major(current)
    if attempted is None:
        logger.warning('cap_check_skipped', last_version=current, reason='could not compute next major version')
        return verdict

    if attempted > cap:
        raise MajorCapExceededError(attempted, cap, repo, branch)

    logger.info('major_release_within_cap', next_major=attempted, cap=cap, repo=repo, branch=branch)
    return verdict


__all__ = [
    'evaluate',
]
