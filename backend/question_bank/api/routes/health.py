"""Health Probes - process liveness and database readiness.

Invariants:
    - GET /api/v1/health/ answers 200 whenever the process serves requests
    - GET /api/v1/health/ready answers 503 until the record store's database
      answers a trivial query within store_timeout_seconds
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from question_bank.config import get_settings
from question_bank.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE = {"service": "question-bank-api", "version": "1.0.0"}


async def _database_status() -> str:
    manager = database.db_manager
    if manager is None:
        return "not_initialized"
    healthy = await manager.health_check(get_settings().store_timeout_seconds)
    return "healthy" if healthy else "unavailable"


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {"status": "healthy", **SERVICE}


@router.get("/ready")
async def readiness():
    """Ready only when the database answers."""
    checks = {"database": await _database_status()}
    if checks["database"] != "healthy":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
