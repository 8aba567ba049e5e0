"""
AdoptMe Backend - Health Check Route
=====================================

What:  GET /health for container probes and load balancers.
How:   Runs `SELECT 1` in a unit of work on the application database;
       reports uptime and version. Answers 503 while the database is unreachable.
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from adoptme import __version__
from adoptme.database import session_scope
from adoptme.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(request: Request):
    db_status = "connected"
    overall = "healthy"

    try:
        async with session_scope(request.app.state.session_factory) as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 1),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=body.model_dump(),
    )
