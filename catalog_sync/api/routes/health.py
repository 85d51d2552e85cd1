"""Health & Readiness Checks.

Invariants:
    - GET /api/v1/health/ answers 200 while the process is up
    - GET /api/v1/health/ready answers 503 until the database answers and both
      remote clients exist; the body names every failing dependency
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import catalog_sync.infrastructure.database as database
import catalog_sync.infrastructure.http_clients as http_clients

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "catalog-sync"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness_check():
    manager = database.db_manager
    checks = {
        "database": manager is not None and await manager.health_check(),
        "commerce": http_clients.commerce_client is not None,
        "rights": http_clients.rights_client is not None,
    }
    failing = [name for name, ok in checks.items() if not ok]
    if failing:
        logger.warning(f"Not ready: {', '.join(failing)}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "failing": failing},
        )
    return {"status": "ready", "checks": {name: "healthy" for name in checks}}
