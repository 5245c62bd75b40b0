"""Health check endpoint for service monitoring.

This module provides health and readiness endpoints for
container orchestration and monitoring systems.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger

from noisewatch import __version__
from noisewatch.api.deps import DatabaseDep

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=Dict[str, Any],
    summary="Health Check",
    description="Check if the API service is running.",
)
async def health_check() -> Dict[str, Any]:
    """Perform a basic health check.

    Returns:
        Dictionary with service status and metadata.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }


@router.get(
    "/health/ready",
    summary="Readiness Check",
    description="Check if the service is ready to accept requests (including DB).",
)
async def readiness_check(database: DatabaseDep) -> JSONResponse:
    """Perform a readiness check including database connectivity.

    Args:
        database: Database handle.

    Returns:
        Detailed service and dependency status; 503 when not ready.
    """
    db_status = "healthy"
    db_message = "Connected"

    try:
        await database.ping()
    except Exception as e:
        logger.warning("Readiness check failed: {}", e)
        db_status = "unhealthy"
        db_message = str(e)

    ready = db_status == "healthy"
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": {
                "database": {
                    "status": db_status,
                    "message": db_message,
                },
            },
        },
    )
