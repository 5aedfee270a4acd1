"""
Audit trail recording and queries.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select

from csrms.core.database import Database
from csrms.core.effects import best_effort
from csrms.models.audit import AuditLog
from csrms.utils.identifiers import generate_log_id

logger = logging.getLogger(__name__)

DEFAULT_LOG_LIMIT = 100


class AuditService:
    """
    Appends audit events and answers audit queries.

    Writing is best-effort: a failed insert is logged and reported as
    ``False`` so the business operation that triggered it carries on.
    Queries have nothing to protect and let storage errors propagate.
    """

    def __init__(self, database: Database):
        self.database = database

    async def log_event(
        self,
        user_id: str,
        action: str,
        details: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> bool:
        """Record one audit event; never raises."""
        entry = AuditLog(
            log_id=generate_log_id(),
            user_id=user_id,
            action=action,
            timestamp=datetime.now(timezone.utc),
            details=details,
            ip_address=ip_address,
        )
        recorded = await best_effort("audit", self._insert(entry))
        if recorded:
            logger.info("Audit log recorded: %s %s", entry.log_id, action)
        return recorded

    async def _insert(self, entry: AuditLog) -> None:
        async with self.database.session() as session:
            session.add(entry)
            await session.commit()

    async def get_logs_by_user(
        self, user_id: str, limit: int = DEFAULT_LOG_LIMIT
    ) -> List[AuditLog]:
        """Newest-first events for a user."""
        stmt = (
            select(AuditLog)
            .where(AuditLog.user_id == user_id)
            .order_by(AuditLog.timestamp.desc())
            .limit(limit)
        )
        return await self._fetch(stmt)

    async def get_logs_by_date_range(
        self, start_date: datetime, end_date: datetime
    ) -> List[AuditLog]:
        """Newest-first events with ``start_date <= timestamp <= end_date``."""
        stmt = (
            select(AuditLog)
            .where(AuditLog.timestamp >= start_date, AuditLog.timestamp <= end_date)
            .order_by(AuditLog.timestamp.desc())
        )
        return await self._fetch(stmt)

    async def get_logs_by_action(
        self, action: str, limit: int = DEFAULT_LOG_LIMIT
    ) -> List[AuditLog]:
        """Newest-first events carrying the given action tag."""
        stmt = (
            select(AuditLog)
            .where(AuditLog.action == action)
            .order_by(AuditLog.timestamp.desc())
            .limit(limit)
        )
        return await self._fetch(stmt)

    async def _fetch(self, stmt) -> List[AuditLog]:
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())
