"""
API schemas for service requests, audit logs and notifications.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SubmissionSummary(CamelModel):
    """Identifying fields returned after a successful submission."""

    request_id: str
    title: str
    category: str
    status: str
    priority: str
    submission_date: datetime


class ServiceRequestRead(CamelModel):
    request_id: str
    title: str
    description: str
    category: str
    status: str
    priority: str
    location: str
    image_path: Optional[str] = None
    user_id: str
    submission_date: datetime
    resolution_date: Optional[datetime] = None


class StatusUpdate(CamelModel):
    """Body of a status change."""

    status: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class AuditLogRead(CamelModel):
    log_id: str
    user_id: str
    action: str
    timestamp: datetime
    details: Optional[str] = None
    ip_address: Optional[str] = None


class NotificationRead(CamelModel):
    notification_id: str
    recipient_id: str
    message: str
    type: str
    sent_date: datetime
    is_read: bool
    request_id: Optional[str] = None
