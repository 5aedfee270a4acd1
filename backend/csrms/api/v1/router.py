"""
API v1 router - aggregates all endpoint routers.
"""

from fastapi import APIRouter

from csrms.api.v1.endpoints import (
    audit_router,
    health_router,
    notifications_router,
    requests_router,
)

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(requests_router, tags=["service-requests"])
api_router.include_router(notifications_router, tags=["notifications"])
api_router.include_router(audit_router, prefix="/audit", tags=["audit"])
