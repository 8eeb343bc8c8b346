"""
HackReg Backend - Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database and reports the registration window.
Who:   Called by Docker health checks, load balancers, and monitoring systems.
When:  Periodically (e.g., every 30 seconds by Docker, every 10 seconds by LB).

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response

from hackreg import __version__
from hackreg.database import ping_database
from hackreg.schemas.challenge import HealthResponse
from hackreg.services.registration import is_registration_alive

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
    description=(
        "Returns the health status of the backend service and its database, "
        "plus whether registration is currently open."
    ),
)
async def health_check(response: Response) -> HealthResponse:
    """
    Check the database with SELECT 1 and report aggregate status.

    Returns:
        HealthResponse with database status, registration window and uptime.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        await ping_database()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        registration="open" if is_registration_alive() else "closed",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
