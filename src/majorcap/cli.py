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

"""Command-line interface for majorcap.

Subcommands::

    majorcap verify   [--repo R] [--branch B] [--source S]
    majorcap analyze  [--repo R] [--branch B] [--source S] [--last-version V]
    majorcap explain  CODE

Results go to stdout (the cap, or the verdict); logs go to stderr.

Exit codes: 0 success, 1 majorcap error (including a blocked major),
2 usage error, 130 interrupted.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich_argparse import RichHelpFormatter

from majorcap import __version__
from majorcap.config import ALLOWED_SOURCES, PluginConfig, load_config
from majorcap.context import RunContext
from majorcap.errors import MajorCapError, explain, render_error
from majorcap.logging import configure_logging, get_logger
from majorcap.plugin import analyze_commits, verify_conditions
from majorcap.vcs import GitRepository

logger = get_logger(__name__)


def _project_root(args: argparse.Namespace) -> Path:
    return Path(args.config) if args.config else Path.cwd()


def _load(args: argparse.Namespace) -> PluginConfig:
    """Load the config file and apply command-line overrides."""
    config = load_config(_project_root(args))
    return config.with_overrides(
        repo=args.repo,
        branch=args.branch,
        source=args.source,
        github_token=args.token,
        timeout=args.timeout,
    )


async def _cmd_verify(args: argparse.Namespace) -> int:
    """Handle the ``verify`` subcommand."""
    config = _load(args)
    resolution = await verify_conditions(config, RunContext())
    print(resolution.cap)  # noqa: T201 - CLI output
    return 0


async def _cmd_analyze(args: argparse.Namespace) -> int:
    """Handle the ``analyze`` subcommand.

    Reads the last release tag and the commits since it from the local
    checkout, then runs both hooks in pipeline order.
    """
    config = _load(args)
    repo = GitRepository(_project_root(args))

    last_tag = await repo.last_release_tag()
    commits = await repo.commits_since(last_tag.name if last_tag else None)
    last_version = args.last_version or (str(last_tag.version) if last_tag else None)
    logger.info('local_history', last_version=last_version, commits=len(commits))

    context = RunContext(commits=commits, last_release_version=last_version)
    await verify_conditions(config, context)
    verdict = await analyze_commits(config, context)
    print(verdict.value)  # noqa: T201 - CLI output
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    """Handle the ``explain`` subcommand."""
    result = explain(args.code)
    if result is None:
        print(f'Unknown error code: {args.code}')  # noqa: T201 - CLI output
        return 1
    print(result)  # noqa: T201 - CLI output
    return 0


def _add_upstream_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--repo',
        metavar='OWNER/NAME',
        help='Upstream GitHub repository (overrides repo in majorcap.toml).',
    )
    parser.add_argument(
        '--branch',
        help='Only count upstream tags reachable from this branch.',
    )
    parser.add_argument(
        '--source',
        choices=sorted(ALLOWED_SOURCES),
        help='Read published releases or raw git tags (default: releases).',
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured :class:`argparse.ArgumentParser`.
    """
    RichHelpFormatter.styles['argparse.groups'] = 'bold yellow'
    parser = argparse.ArgumentParser(
        prog='majorcap',
        description='Block major releases that would outrun the upstream major version.',
        formatter_class=RichHelpFormatter,
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    parser.add_argument(
        '--config',
        metavar='DIR',
        default=None,
        help='Project root holding majorcap.toml or pyproject.toml. Defaults to the current directory.',
    )
    parser.add_argument(
        '--token',
        default=None,
        help='GitHub token. Defaults to GITHUB_TOKEN, then GH_TOKEN.',
    )
    parser.add_argument(
        '--timeout',
        type=float,
        default=None,
        help='Per-request HTTP timeout in seconds.',
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging.')
    verbosity.add_argument('--quiet', '-q', action='store_true', help='Only log warnings and errors.')
    parser.add_argument(
        '--json-log',
        action='store_true',
        help='Emit logs as JSON lines.',
    )

    subparsers = parser.add_subparsers(dest='command')

    verify_parser = subparsers.add_parser(
        'verify',
        help='Resolve and print the upstream major version cap.',
        formatter_class=RichHelpFormatter,
    )
    _add_upstream_options(verify_parser)

    analyze_parser = subparsers.add_parser(
        'analyze',
        help='Classify local commits and block a major that exceeds the cap.',
        formatter_class=RichHelpFormatter,
    )
    _add_upstream_options(analyze_parser)
    analyze_parser.add_argument(
        '--last-version',
        metavar='VERSION',
        default=None,
        help='Last released version. Defaults to the highest semver tag merged into HEAD.',
    )

    explain_parser = subparsers.add_parser(
        'explain',
        help='Explain an error code (e.g. MC-MAJOR-CAP-EXCEEDED).',
        formatter_class=RichHelpFormatter,
    )
    explain_parser.add_argument('code', help='Error code to explain.')

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Arguments to parse; ``sys.argv[1:]`` when omitted.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)

    try:
        command = args.command
        if command == 'verify':
            return asyncio.run(_cmd_verify(args))
        if command == 'analyze':
            return asyncio.run(_cmd_analyze(args))
        if command == 'explain':
            return _cmd_explain(args)

        parser.print_help()  # noqa: T201 - CLI output
        print(  # noqa: T201 - CLI output
            f'\n{parser.prog}: error: please provide a command',
            file=sys.stderr,
        )
        return 2

    except MajorCapError as exc:
        render_error(exc)
        return 1
    except KeyboardInterrupt:
        logger.info('interrupted')
        return 130


def _main() -> None:
    """Wrapper for pyproject.toml [project.scripts] entry point."""
    sys.exit(main())


__all__ = [
    'build_parser',
    'main',
]
