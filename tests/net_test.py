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

"""Tests for majorcap.net module.

Uses httpx mock transport to avoid real network calls.
"""

from __future__ import annotations

import httpx
import pytest
from majorcap.logging import configure_logging
from majorcap.net import http_client, request_with_retry

configure_logging(quiet=True)


def _sequence(*outcomes: int | Exception) -> tuple[httpx.MockTransport, list[httpx.Request]]:
    """Transport that replays status codes or exceptions in order."""
    requests: list[httpx.Request] = []
    remaining = list(outcomes)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        outcome = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome, json={})

    return httpx.MockTransport(handler), requests


class TestHttpClient:
    """Tests for http_client() context manager."""

    @pytest.mark.asyncio()
    async def test_applies_headers_and_timeout(self) -> None:
        """Default headers and timeout are set on the client."""
        async with http_client(timeout=7.0, headers={'X-Test': '1'}) as client:
            assert client.headers['X-Test'] == '1'
            assert client.timeout.read == 7.0


class TestRequestWithRetry:
    """Tests for request_with_retry()."""

    @pytest.mark.asyncio()
    async def test_success_first_try(self) -> None:
        """A 200 returns immediately."""
        transport, requests = _sequence(200)
        async with httpx.AsyncClient(transport=transport) as client:
            response = await request_with_retry(client, 'GET', 'https://api.test/x', backoff_base=0)
        assert response.status_code == 200
        assert len(requests) == 1

    @pytest.mark.asyncio()
    async def test_retries_5xx(self) -> None:
        """A 503 is retried until success."""
        transport, requests = _sequence(503, 502, 200)
        async with httpx.AsyncClient(transport=transport) as client:
            response = await request_with_retry(client, 'GET', 'https://api.test/x', backoff_base=0)
        assert response.status_code == 200
        assert len(requests) == 3

    @pytest.mark.asyncio()
    async def test_returns_last_5xx(self) -> None:
        """A persistent 5xx is returned, not raised."""
        transport, requests = _sequence(500)
        async with httpx.AsyncClient(transport=transport) as client:
            response = await request_with_retry(client, 'GET', 'https://api.test/x', max_retries=1, backoff_base=0)
        assert response.status_code == 500
        assert len(requests) == 2

    @pytest.mark.asyncio()
    async def test_does_not_retry_4xx(self) -> None:
        """Client errors, including rate limits, are not retried."""
        transport, requests = _sequence(403)
        async with httpx.AsyncClient(transport=transport) as client:
            response = await request_with_retry(client, 'GET', 'https://api.test/x', backoff_base=0)
        assert response.status_code == 403
        assert len(requests) == 1

    @pytest.mark.asyncio()
    async def test_retries_network_error(self) -> None:
        """A connection error is retried."""
        transport, requests = _sequence(httpx.ConnectError('refused'), 200)
        async with httpx.AsyncClient(transport=transport) as client:
            response = await request_with_retry(client, 'GET', 'https://api.test/x', backoff_base=0)
        assert response.status_code == 200
        assert len(requests) == 2

    @pytest.mark.asyncio()
    async def test_raises_after_last_attempt(self) -> None:
        """A persistent timeout is re-raised."""
        transport, requests = _sequence(httpx.ReadTimeout('slow'))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(httpx.ReadTimeout):
                await request_with_retry(client, 'GET', 'https://api.test/x', max_retries=2, backoff_base=0)
        assert len(requests) == 3
