"""
Persisted notifications.
"""
import enum

from sqlalchemy import Column, String, DateTime, Text, Boolean

from csrms.core.database import Base


class NotificationType(str, enum.Enum):
    """Delivery channel; only EMAIL is also dispatched over SMTP."""
    EMAIL = "Email"
    SYSTEM = "System"


class Notification(Base):
    __tablename__ = "notifications"

    notification_id = Column(String(11), primary_key=True)
    recipient_id = Column(String, nullable=False, index=True)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default=NotificationType.EMAIL.value)
    sent_date = Column(DateTime(timezone=True), nullable=False, index=True)
    is_read = Column(Boolean, nullable=False, default=False)
    request_id = Column(String(11), index=True)
