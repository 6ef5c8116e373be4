"""
HexNet — Health Check Route
=============================

What:  Liveness endpoint for container health checks and load balancers.

The service has no external dependencies, so a response at all means it is
healthy; the body reports version and uptime.
"""

import time

from fastapi import APIRouter

from hexnet import __version__
from hexnet.schemas.route import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
