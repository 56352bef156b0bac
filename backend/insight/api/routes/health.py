"""Health & Readiness Probes: liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 until the stores are hydrated and while
      the snapshot database is unreachable (writes would only warn)
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from insight.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "insight-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check(request: Request):
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        return _not_ready("stores_not_hydrated")
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return _not_ready("database_unavailable")
    return {
        "status": "ready",
        "checks": {"database": "healthy", "stores": len(registry)},
    }


def _not_ready(reason: str) -> JSONResponse:
    logger.warning(f"Readiness check failed: {reason}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
