"""
HexNet — Middleware Unit Tests
================================

What:  Tests for the rate limiter's bookkeeping, request ID handling and
       the access log line.
"""

import logging
from collections import deque
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from starlette.responses import Response

from hexnet.middleware.logging import level_for_status
from hexnet.middleware.rate_limit import RateLimitMiddleware
from hexnet.middleware.request_id import resolve_request_id


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_request(ip: str, path: str = "/api/convert"):
    request = MagicMock()
    request.url.path = path
    request.client.host = ip
    return request


class TestRateLimitSweep:
    """Tests for RateLimitMiddleware bookkeeping."""

    def setup_method(self):
        self.clock = FakeClock()
        self.middleware = RateLimitMiddleware(MagicMock(), clock=self.clock)
        self.call_next = AsyncMock(return_value=Response("ok"))
        self.limits = MagicMock(rate_limit_requests=3, rate_limit_window=60)

    def test_sweep_drops_only_idle_clients(self):
        now = self.clock()
        self.middleware._hits["10.0.0.1"] = deque([now - 500])
        self.middleware._hits["10.0.0.2"] = deque()
        self.middleware._hits["10.0.0.3"] = deque([now - 500, now])

        dropped = self.middleware.sweep(cutoff=now - 60)

        assert dropped == 2
        assert list(self.middleware._hits) == ["10.0.0.3"]
        assert list(self.middleware._hits["10.0.0.3"]) == [now]

    @pytest.mark.asyncio
    async def test_idle_clients_dropped_during_dispatch(self):
        with patch("hexnet.middleware.rate_limit.settings", self.limits):
            for i in range(50):
                await self.middleware.dispatch(make_request(f"10.0.1.{i}"), self.call_next)
            assert self.middleware.tracked_clients() == 50

            self.clock.advance(61)
            await self.middleware.dispatch(make_request("10.0.2.1"), self.call_next)

        assert self.middleware.tracked_clients() == 1
        assert "10.0.2.1" in self.middleware._hits

    @pytest.mark.asyncio
    async def test_no_sweep_inside_window(self):
        with patch("hexnet.middleware.rate_limit.settings", self.limits):
            await self.middleware.dispatch(make_request("10.0.1.1"), self.call_next)
            self.clock.advance(30)
            await self.middleware.dispatch(make_request("10.0.1.2"), self.call_next)

        assert self.middleware.tracked_clients() == 2

    @pytest.mark.asyncio
    async def test_limit_recovers_after_window(self):
        with patch("hexnet.middleware.rate_limit.settings", self.limits):
            statuses = [
                (await self.middleware.dispatch(make_request("10.0.0.9"), self.call_next)).status_code
                for _ in range(4)
            ]
            self.clock.advance(61)
            after = await self.middleware.dispatch(make_request("10.0.0.9"), self.call_next)

        assert statuses == [200, 200, 200, 429]
        assert after.status_code == 200
        assert len(self.middleware._hits["10.0.0.9"]) == 1

    @pytest.mark.asyncio
    async def test_retry_after_counts_down_to_oldest_hit(self):
        with patch("hexnet.middleware.rate_limit.settings", self.limits):
            for _ in range(3):
                await self.middleware.dispatch(make_request("10.0.0.9"), self.call_next)
            self.clock.advance(20)
            rejected = await self.middleware.dispatch(make_request("10.0.0.9"), self.call_next)

        assert rejected.status_code == 429
        assert rejected.headers["Retry-After"] == "41"

    @pytest.mark.asyncio
    async def test_exempt_paths_not_tracked(self):
        with patch("hexnet.middleware.rate_limit.settings", self.limits):
            await self.middleware.dispatch(make_request("10.0.0.1", "/health"), self.call_next)

        assert self.middleware.tracked_clients() == 0
        self.call_next.assert_awaited_once()


class TestRequestID:
    """resolve_request_id() and the X-Request-ID header."""

    @pytest.mark.parametrize("value", ["trace-42", "a1b2c3d4", "svc.edge:17_x"])
    def test_well_formed_id_kept(self, value):
        assert resolve_request_id(value) == value

    @pytest.mark.parametrize(
        "value",
        [None, "", "x" * 65, "has space", "line\nbreak", "<script>"],
    )
    def test_unusable_id_replaced(self, value):
        rid = resolve_request_id(value)
        assert rid != value
        assert len(rid) == 8

    @pytest.mark.asyncio
    async def test_unusable_header_not_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "x" * 200})

        assert response.headers["X-Request-ID"] != "x" * 200
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.post(
            "/api/encode",
            json={"target": "bad", "route": "10.0.0.1"},
            headers={"X-Request-ID": "trace-7"},
        )

        assert response.status_code == 400
        assert response.json()["request_id"] == "trace-7"


class TestAccessLog:
    """RequestLoggingMiddleware log levels."""

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (302, logging.INFO), (400, logging.WARNING),
         (429, logging.WARNING), (500, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level

    @pytest.mark.asyncio
    async def test_client_error_logged_as_warning(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="hexnet.access"):
            await test_client.post(
                "/api/encode",
                json={"target": "bad", "route": "10.0.0.1"},
                headers={"X-Request-ID": "trace-9"},
            )

        records = [r for r in caplog.records if r.name == "hexnet.access"]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].status == 400
        assert records[0].path == "/api/encode"
        assert records[0].request_id == "trace-9"
        assert records[0].getMessage().startswith("POST /api/encode 400 ")

    @pytest.mark.asyncio
    async def test_health_not_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="hexnet.access"):
            await test_client.get("/health")

        assert not [r for r in caplog.records if r.name == "hexnet.access"]
