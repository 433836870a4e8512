"""
Notebook API - Liveness & Health Routes
=======================================

What:  GET / (plain-text liveness) and GET /health (store connectivity).
Who:   Load balancers, container health checks, humans with curl.

Status levels for /health:
    - healthy:    the document store answers SELECT 1 (HTTP 200)
    - unhealthy:  the store is unreachable or not connected (HTTP 503)

Neither route requires a bearer credential.
"""

import logging
import time

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from notebook_api import __version__
from notebook_api.database import DocumentStore
from notebook_api.dependencies import get_store
from notebook_api.schemas.document import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Liveness text")
async def root() -> str:
    return "Notes API is running..."


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Document store unreachable", "model": HealthResponse}},
)
async def health_check(
    response: Response,
    store: DocumentStore = Depends(get_store),
) -> HealthResponse:
    """
    Probe the document store with a lightweight query.

    A store that was never connected counts as disconnected.
    """
    db_status = "connected"
    overall = "healthy"

    if not store.connected or not await store.ping():
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: document store unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
