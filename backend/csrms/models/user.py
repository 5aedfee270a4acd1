"""
User directory and citizen bookkeeping models.
"""

from __future__ import annotations

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, func

from csrms.core.database import Base


class UserRole:
    """Roles known to the notification directory."""

    CITIZEN = "citizen"
    STAFF = "staff"

    ALL_ROLES = [CITIZEN, STAFF]


class User(Base):
    """Anyone who can receive a notification (citizens and municipal staff)."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255))
    role = Column(String(20), nullable=False, default=UserRole.CITIZEN, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, role={self.role})>"


class Citizen(Base):
    """Per-citizen counters."""

    __tablename__ = "citizens"

    user_id = Column(String, ForeignKey("users.user_id"), primary_key=True)
    total_requests_resolved = Column(Integer, nullable=False, default=0, server_default="0")
