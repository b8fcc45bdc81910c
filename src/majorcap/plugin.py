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

"""Release pipeline lifecycle hooks.

Two hooks, called in order by the pipeline for one run::

    verify_conditions(config, ctx)
        validate config ──→ resolve cap ──→ ctx.major_cap_from_upstream = cap

    analyze_commits(config, ctx)
        classify commits ──→ not major? return verdict
                         └─→ major: cap = ctx.major_cap_from_upstream
                                          (resolved now if verify did not run)
                                    gate.evaluate(...) ──→ verdict or raise

Reusing the stored cap saves a round trip; recomputing it when absent
keeps ``analyze_commits`` usable on its own. Resolution has no side
effects, so both paths produce the same cap.
"""

from __future__ import annotations

from majorcap.analyzer import DEFAULT_ANALYZER_CONFIG, CommitClassifier, ConventionalCommitClassifier, ReleaseType
from majorcap.config import PluginConfig, validate_config
from majorcap.context import RunContext
from majorcap.gate import evaluate
from majorcap.logging import get_logger, upstream_context
from majorcap.resolver import CapResolution, UpstreamSource, resolve_major_cap

logger = get_logger(__name__)


async def _resolve(config: PluginConfig, client: UpstreamSource | None) -> CapResolution:
    return await resolve_major_cap(
        config.repo,
        config.branch or None,
        config.github_token or None,
        source=config.tag_source,
        client=client,
        timeout=config.timeout,
    )


async def verify_conditions(
    config: PluginConfig,
    context: RunContext,
    *,
    client: UpstreamSource | None = None,
) -> CapResolution:
    """Validate the configuration and store the upstream cap on ``context``.

    "No qualifying tag" is not a failure: the cap is stored as ``0``.

    Args:
        config: Plugin configuration.
        context: Per-run context; receives ``major_cap_from_upstream``.
        client: Hosting API client override (tests, GitHub Enterprise).

    Returns:
        The :class:`CapResolution` that was stored.

    Raises:
        ConfigurationError: If ``repo`` is missing or malformed.
        UpstreamFetchError: If the hosting API is unreachable.
        UpstreamDataError: If the hosting API answered with an error.
    """
    validate_config(config)
    with upstream_context(config.repo, config.branch or None):
        logger.info('checking_upstream_tags', source=config.source)
        resolution = await _resolve(config, client)
    context.major_cap_from_upstream = resolution.cap
    return resolution


async def analyze_commits(
    config: PluginConfig,
    context: RunContext,
    *,
    classifier: CommitClassifier | None = None,
    client: UpstreamSource | None = None,
) -> ReleaseType:
    """Classify the run's commits and block majors that outrun upstream.

    Args:
        config: Plugin configuration.
        context: Per-run context with commits and the last release.
        classifier: Commit classifier; the conventional-commits
            classifier when omitted.
        client: Hosting API client override.

    Returns:
        The classifier's verdict, unchanged.

    Raises:
        ConfigurationError: If the configuration is invalid.
        MajorCapExceededError: If the next major would exceed the cap.
    """
    validate_config(config)

    analyzer_config = config.commit_analyzer_config
    if analyzer_config:
        logger.info('analyzer_config_custom')
    else:
        logger.info('analyzer_config_default', config=DEFAULT_ANALYZER_CONFIG)
        analyzer_config = DEFAULT_ANALYZER_CONFIG

    classifier = classifier or ConventionalCommitClassifier()
    verdict = classifier.classify(context.commits, analyzer_config)
    logger.info('commits_classified', commits=len(context.commits), release_type=verdict.value)

    if verdict != ReleaseType.MAJOR:
        logger.info('cap_check_not_applicable', release_type=verdict.value)
        return verdict

    with upstream_context(config.repo, config.branch or None):
        cap = context.major_cap_from_upstream
        if cap is None:
            logger.info('resolving_upstream_cap')
            cap = (await _resolve(config, client)).cap
            context.major_cap_from_upstream = cap
        else:
            logger.debug('reusing_upstream_cap', cap=cap)

        return evaluate(
            verdict,
            context.last_release_version,
            cap,
            repo=config.repo,
            branch=config.branch or None,
        )


__all__ = [
    'analyze_commits',
    'verify_conditions',
]
