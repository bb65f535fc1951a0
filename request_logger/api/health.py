"""Health endpoint.

GET /health doubles as liveness and readiness probe: the service is only
useful while it can reach PostgreSQL, so a failed ping answers 503 and the
load balancer stops routing here until the database is back.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from request_logger.api.dependencies import RepoDep
from request_logger.core.clock import utcnow
from request_logger.repos.request_log_repo import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=None)
async def health(repo: RepoDep) -> dict | JSONResponse:
    try:
        await repo.ping()
    except StorageError as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "error": str(e)},
        )

    return {
        "status": "healthy",
        "timestamp": utcnow(),
        "database": "connected",
    }
