"""
Notepad Backend: Health Check Route
=====================================

What:  Health check endpoint for monitoring and container probes.
How:   Probes the configured note store and reports uptime.

Status levels:
    - healthy:   store reachable (HTTP 200)
    - unhealthy: store unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response

from notepad import __version__
from notepad.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """Runs the store's cheap probe (directory check or SELECT 1)."""
    store = request.app.state.note_store
    reachable = await store.health_check()
    if not reachable:
        logger.warning("Health check: %s store unreachable", store.name)
        response.status_code = 503

    return HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        store=f"{store.name}:{'ok' if reachable else 'unreachable'}",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
