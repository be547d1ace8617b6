"""
Orders API — Health Check Route
================================

What:  GET /health for container probes and load balancers.
Why:   An instance that cannot reach its database should stop receiving traffic.
How:   Runs SELECT 1 on the engine. Reachable database → 200 "healthy",
       otherwise 503 "unhealthy" so the instance is taken out of rotation.
Who:   Docker HEALTHCHECK, load balancers, uptime monitors.
When:  Polled every few seconds; skipped by the access log middleware.
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from orders_api import __version__
from orders_api import database
from orders_api.schemas.order import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
