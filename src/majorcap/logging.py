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

"""Structured logging for majorcap.

Configures `structlog <https://www.structlog.org/>`_ with two output modes:

- **Console** (default): human-readable output, colored on a TTY.
- **JSON** (``--json-log``): one JSON object per line, for CI log parsers.

Both modes write to stderr so stdout carries only the command result
(the cap for ``verify``, the verdict for ``analyze``).

The lifecycle hooks wrap their work in :func:`upstream_context`, so
every resolver, client and gate event names the upstream repository
(and branch) the cap is derived from without passing it to each call.

Usage::

    from majorcap.logging import configure_logging, get_logger

    configure_logging(verbose=True)
    log = get_logger(__name__)
    log.info('upstream_cap_resolved', repo='cli/cli', cap=2)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
) -> None:
    """Configure structlog for majorcap.

    Should be called once at startup, before any logging calls.

    Args:
        verbose: Enable debug-level output.
        quiet: Suppress info-level output (only warnings and errors).
        json_log: Use JSON output instead of console output.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        format='%(message)s',
        stream=sys.stderr,
        level=level,
        force=True,
    )
    # httpx logs every request line at INFO; only show them with --verbose.
    logging.getLogger('httpx').setLevel(logging.DEBUG if verbose else logging.WARNING)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_log:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str = 'majorcap') -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger.

    Args:
        name: Logger name, used for filtering and identification.

    Returns:
        A :class:`structlog.stdlib.BoundLogger` instance.
    """
    return structlog.get_logger(name)


@contextmanager
def upstream_context(repo: str, branch: str | None = None) -> Iterator[None]:
    """Tag every event logged inside the block with the upstream it concerns.

    Binds ``upstream_repo`` (and ``upstream_branch`` when set) through
    :mod:`structlog.contextvars`, which :func:`configure_logging` merges
    into each event. Nested blocks restore the outer values on exit.

    Usage::

        with upstream_context('cli/cli', 'trunk'):
            await resolve_major_cap('cli/cli', 'trunk')
    """
    bindings = {'upstream_repo': repo}
    if branch:
        bindings['upstream_branch'] = branch
    with structlog.contextvars.bound_contextvars(**bindings):
        yield


__all__ = [
    'configure_logging',
    'get_logger',
    'upstream_context',
]
