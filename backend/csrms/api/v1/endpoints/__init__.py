"""
Convenience exports for API v1 endpoint routers.

This allows ``from csrms.api.v1.endpoints import requests_router`` style
imports used by the aggregate router module.
"""

from .health import router as health_router
from .requests import router as requests_router
from .notifications import router as notifications_router
from .audit import router as audit_router

__all__ = [
    "health_router",
    "requests_router",
    "notifications_router",
    "audit_router",
]
