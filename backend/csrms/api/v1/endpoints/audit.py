"""
Audit trail query endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from csrms.api.deps import get_audit_service
from csrms.schemas.service_requests import AuditLogRead
from csrms.services.audit import AuditService, DEFAULT_LOG_LIMIT

router = APIRouter()


def _as_utc(value: datetime) -> datetime:
    """Naive bounds are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _envelope(logs) -> dict:
    return {
        "success": True,
        "count": len(logs),
        "data": [AuditLogRead.model_validate(log).to_json() for log in logs],
    }


@router.get("/user/{user_id}")
async def logs_by_user(
    user_id: str,
    limit: int = Query(DEFAULT_LOG_LIMIT, ge=1, le=1000),
    service: AuditService = Depends(get_audit_service),
):
    """Audit events recorded for a user, newest first."""
    return _envelope(await service.get_logs_by_user(user_id, limit=limit))


@router.get("/action/{action}")
async def logs_by_action(
    action: str,
    limit: int = Query(DEFAULT_LOG_LIMIT, ge=1, le=1000),
    service: AuditService = Depends(get_audit_service),
):
    """Audit events with the given action tag, newest first."""
    return _envelope(await service.get_logs_by_action(action, limit=limit))


@router.get("/range")
async def logs_by_date_range(
    start: datetime = Query(...),
    end: datetime = Query(...),
    service: AuditService = Depends(get_audit_service),
):
    """Audit events between ``start`` and ``end`` (inclusive), newest first."""
    start, end = _as_utc(start), _as_utc(end)
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    return _envelope(await service.get_logs_by_date_range(start, end))
