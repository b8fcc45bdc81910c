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

"""Commit classification.

The cap gate treats classification as a collaborator behind the
:class:`CommitClassifier` protocol, so any implementation (or a test
stub returning a fixed verdict) can be injected.

Built-in classifier:

- :class:`ConventionalCommitClassifier`: ``type(scope)!: description``

Usage::

    from majorcap.analyzer import Commit, ReleaseType, classify

    verdict = classify([Commit(header='feat!: drop Python 3.9')])
    assert verdict == ReleaseType.MAJOR
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from majorcap.analyzer._conventional import (
    DEFAULT_PRESET,
    ConventionalCommitClassifier,
    ReleaseRule,
    parse_header,
)
from majorcap.analyzer._types import (
    Commit,
    CommitClassifier,
    ReleaseType,
    max_release,
)

# Configuration used when the caller supplies none.
DEFAULT_ANALYZER_CONFIG: dict[str, Any] = {'preset': DEFAULT_PRESET}

_DEFAULT_CLASSIFIER = ConventionalCommitClassifier()


def classify(commits: Sequence[Commit], config: Mapping[str, Any] | None = None) -> ReleaseType:
    """Classify ``commits`` with the default classifier.

    Args:
        commits: Commits since the last release.
        config: Classifier configuration; defaults to
            :data:`DEFAULT_ANALYZER_CONFIG`.
    """
    return _DEFAULT_CLASSIFIER.classify(commits, config or DEFAULT_ANALYZER_CONFIG)


__all__ = [
    'DEFAULT_ANALYZER_CONFIG',
    'Commit',
    'CommitClassifier',
    'ConventionalCommitClassifier',
    'ReleaseRule',
    'ReleaseType',
    'classify',
    'max_release',
    'parse_header',
]
