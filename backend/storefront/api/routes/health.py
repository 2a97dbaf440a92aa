"""Storefront Probes - process liveness and database readiness.

Invariants:
    - GET /health/ answers 200 whenever the app can serve requests at all
    - GET /health/ready answers 503 until db_manager exists and SELECT 1 succeeds
    - db_manager read through the module at call time (it is replaced on startup
      and patched in tests)
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import storefront.infrastructure.database as database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "storefront-api"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@router.get("/ready")
async def readiness_check():
    """Ready once the catalog database answers."""
    manager = database.db_manager
    if manager is None:
        logger.warning("Readiness: database not initialized")
        return _not_ready()
    if not await manager.health_check():
        logger.warning("Readiness: database unreachable")
        return _not_ready()
    return {"status": "ready", "checks": {"database": "healthy"}}


def _not_ready() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": "database_unavailable"},
    )
