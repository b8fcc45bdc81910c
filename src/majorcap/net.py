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

"""HTTP utilities for majorcap.

Provides a managed :class:`httpx.AsyncClient` with:

- Connection pooling and a bounded per-request timeout.
- Automatic retry with exponential backoff for transient errors.
- Structured logging of retries.

Used by :mod:`majorcap.github` for every hosting API call.

Usage::

    from majorcap.net import http_client, request_with_retry

    async with http_client(headers=headers) as client:
        response = await request_with_retry(client, 'GET', url)
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Final

import httpx

from majorcap.logging import get_logger

log = get_logger('majorcap.net')

DEFAULT_POOL_SIZE: Final[int] = 4
DEFAULT_TIMEOUT: Final[float] = 30.0

MAX_RETRIES: Final[int] = 2
RETRY_BACKOFF_BASE: Final[float] = 1.0

# Server-side failures worth another attempt. Rate limiting (403/429) is
# not retried: GitHub's window resets far beyond any sane backoff.
RETRYABLE_STATUS_CODES: Final[frozenset[int]] = frozenset({500, 502, 503, 504})


@asynccontextmanager
async def http_client(
    *,
    pool_size: int = DEFAULT_POOL_SIZE,
    timeout: float = DEFAULT_TIMEOUT,
    base_url: str = '',
    headers: dict[str, str] | None = None,
) -> AsyncGenerator[httpx.AsyncClient]:
    """Create a managed async HTTP client with connection pooling.

    Args:
        pool_size: Maximum number of connections in the pool.
        timeout: Request timeout in seconds.
        base_url: Optional base URL for all requests.
        headers: Optional default headers.

    Yields:
        An :class:`httpx.AsyncClient` instance.
    """
    limits = httpx.Limits(
        max_connections=pool_size,
        max_keepalive_connections=pool_size,
    )
    async with httpx.AsyncClient(
        limits=limits,
        timeout=httpx.Timeout(timeout),
        base_url=base_url,
        headers=headers or {},
        follow_redirects=True,
    ) as client:
        yield client


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    max_retries: int = MAX_RETRIES,
    backoff_base: float = RETRY_BACKOFF_BASE,
    **kwargs: object,
) -> httpx.Response:
    """Make an HTTP request with automatic retry for transient errors.

    Retries on 5xx responses, timeouts and network errors, with
    exponential backoff between attempts. Unlike a ``raise_for_status``
    helper, the final response is returned whatever its status so the
    caller can turn it into a precise diagnostic.

    Args:
        client: The httpx async client to use.
        method: HTTP method (GET, POST, etc.).
        url: Request URL.
        max_retries: Maximum number of retry attempts.
        backoff_base: Base delay in seconds for exponential backoff.
        **kwargs: Additional keyword arguments passed to ``client.request()``.

    Returns:
        The last :class:`httpx.Response` received.

    Raises:
        httpx.TransportError: If every attempt failed at the transport
            level (connection refused, DNS, timeout, ...).
    """
    for attempt in range(max_retries + 1):
        last_attempt = attempt == max_retries
        delay = backoff_base * (2**attempt)
        try:
            response = await client.request(method, url, **kwargs)  # type: ignore[arg-type]
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            if last_attempt:
                raise
            log.warning(
                'http_retry_error',
                url=url,
                error=str(exc) or type(exc).__name__,
                attempt=attempt + 1,
                delay=delay,
            )
            await asyncio.sleep(delay)
            continue

        if response.status_code not in RETRYABLE_STATUS_CODES or last_attempt:
            return response

        log.warning(
            'http_retry',
            url=url,
            status=response.status_code,
            attempt=attempt + 1,
            delay=delay,
        )
        await asyncio.sleep(delay)

    # max_retries >= 0 guarantees at least one attempt.
    msg = 'request_with_retry: no attempts were made'
    raise RuntimeError(msg)


__all__ = [
    'DEFAULT_POOL_SIZE',
    'DEFAULT_TIMEOUT',
    'MAX_RETRIES',
    'RETRYABLE_STATUS_CODES',
    'http_client',
    'request_with_retry',
]
