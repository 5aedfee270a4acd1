"""
Append-only audit trail.
"""
from sqlalchemy import Column, String, DateTime, Text, Index

from csrms.core.database import Base


class AuditAction:
    """Action tags written by the request workflow."""
    SUBMIT_REQUEST = "SUBMIT_REQUEST"
    SUBMIT_REQUEST_ERROR = "SUBMIT_REQUEST_ERROR"
    UPDATE_REQUEST_STATUS = "UPDATE_REQUEST_STATUS"
    UPDATE_REQUEST_STATUS_ERROR = "UPDATE_REQUEST_STATUS_ERROR"


class AuditLog(Base):
    """
    Immutable record of a user or system action.

    Rows are only ever inserted; nothing updates or deletes them.
    """
    __tablename__ = "audit_logs"

    log_id = Column(String(11), primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    action = Column(String(100), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    details = Column(Text)
    ip_address = Column(String(45))

    __table_args__ = (
        Index("idx_audit_logs_user_time", "user_id", "timestamp"),
    )
