"""
HexNet — Rate Limiting Middleware
===================================

What:  Per-IP sliding window limit on conversion requests.
How:   Each client IP owns a deque of request times, oldest on the left.
       Expired times are popped from the left before every check, and once
       per window a sweep drops IPs whose deque has emptied.

    time ──────────────────────────────────────────────▶
          [ expired | t1  t2  t3 ... tN ] ← now
                    └──── window ────┘
          popleft()                    append(now)

The state is per process; with several uvicorn workers each one counts
separately.
"""

import logging
import time
from collections import deque
from typing import Callable, Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from hexnet.config import settings
from hexnet.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Configuration (from settings, read per request):
        rate_limit_requests: Requests allowed per window (default: 300)
        rate_limit_window:   Window length in seconds (default: 60)

    Args:
        clock: Monotonic time source, replaceable in tests.
    """

    EXEMPT_PATHS = frozenset({"/health", "/docs", "/openapi.json", "/redoc"})

    def __init__(self, app, clock: Callable[[], float] = time.monotonic, **kwargs):
        super().__init__(app, **kwargs)
        self.clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    @staticmethod
    def client_key(request: Request) -> str:
        # Behind a reverse proxy every client shares the proxy's address
        return request.client.host if request.client else "unknown"

    def _expire(self, hits: Deque[float], cutoff: float) -> None:
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def sweep(self, cutoff: float) -> int:
        """Forget IPs with no request after cutoff; returns how many were dropped."""
        idle = []
        for key, hits in self._hits.items():
            self._expire(hits, cutoff)
            if not hits:
                idle.append(key)
        for key in idle:
            del self._hits[key]
        if idle:
            logger.debug("Dropped %d idle rate limit entries", len(idle))
        return len(idle)

    def tracked_clients(self) -> int:
        return len(self._hits)

    def _reject(self, key: str, hits: Deque[float], now: float, window: int) -> Response:
        retry_after = max(1, int(hits[0] + window - now) + 1)
        logger.warning("Rate limit hit by %s: %d requests in %ds", key, len(hits), window)

        # Raised-and-handled would bypass this middleware's position in the
        # stack, so the 429 is answered here with the handlers' body shape
        exc = RateLimitExceededError(retry_after=retry_after)
        return JSONResponse(
            status_code=429,
            content={
                "error": "rate_limit_exceeded",
                "message": exc.message,
                "details": exc.context,
            },
            headers={"Retry-After": str(exc.retry_after)},
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        window = settings.rate_limit_window
        now = self.clock()
        cutoff = now - window

        if now - self._last_sweep >= window:
            self.sweep(cutoff)
            self._last_sweep = now

        key = self.client_key(request)
        hits = self._hits.setdefault(key, deque())
        self._expire(hits, cutoff)

        if len(hits) >= settings.rate_limit_requests:
            return self._reject(key, hits, now, window)

        hits.append(now)
        return await call_next(request)
