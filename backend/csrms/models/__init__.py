"""
SQLAlchemy database models.
"""

from csrms.models.user import User, Citizen, UserRole
from csrms.models.service_request import (
    ServiceRequest,
    RequestCategory,
    RequestStatus,
    RequestPriority,
    TERMINAL_STATUSES,
)
from csrms.models.audit import AuditLog, AuditAction
from csrms.models.notification import Notification, NotificationType

__all__ = [
    "User",
    "Citizen",
    "UserRole",
    "ServiceRequest",
    "RequestCategory",
    "RequestStatus",
    "RequestPriority",
    "TERMINAL_STATUSES",
    "AuditLog",
    "AuditAction",
    "Notification",
    "NotificationType",
]
