"""
Health check endpoints.
"""

from typing import Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from csrms.core.database import Database, get_database

router = APIRouter()


@router.get("/liveness", status_code=status.HTTP_200_OK)
async def liveness() -> Dict[str, str]:
    """Liveness check."""
    return {"status": "alive"}


@router.get("/readiness")
async def readiness(database: Database = Depends(get_database)):
    """Readiness check that verifies database connectivity through the pool."""
    checks: Dict[str, Dict[str, str]] = {}
    overall_status = status.HTTP_200_OK

    try:
        await database.ping()
        checks["database"] = {"status": "pass"}
    except Exception as exc:
        checks["database"] = {"status": "fail", "reason": str(exc)}
        overall_status = status.HTTP_503_SERVICE_UNAVAILABLE

    body = {
        "status": "ready" if overall_status == status.HTTP_200_OK else "not_ready",
        "checks": checks,
    }
    return JSONResponse(status_code=overall_status, content=body)
