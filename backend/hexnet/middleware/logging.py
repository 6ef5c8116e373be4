"""
HexNet — Access Log Middleware
================================

What:  Writes one line per request to the "hexnet.access" logger.
How:   Times the downstream call, then logs method, path, status, elapsed
       milliseconds, request ID and client address. The same values are
       attached as record attributes for structured handlers.

    POST /api/decode 200 0.8ms [3f9a1c2e] from 10.1.2.3

Bodies are not logged. /health is skipped; monitors poll it constantly.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hexnet.middleware.request_id import request_id_var

access_logger = logging.getLogger("hexnet.access")


def level_for_status(status: int) -> int:
    """ERROR for 5xx, WARNING for 4xx, INFO otherwise."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging; must sit inside RequestIDMiddleware to see the ID."""

    QUIET_PATHS = frozenset({"/health"})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        fields = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": path,
            "status": response.status_code,
            "duration_ms": elapsed_ms,
            "client_ip": request.client.host if request.client else "unknown",
        }
        access_logger.log(
            level_for_status(response.status_code),
            "%(method)s %(path)s %(status)d %(duration_ms).1fms [%(request_id)s] from %(client_ip)s",
            fields,
            extra=fields,
        )
        return response
