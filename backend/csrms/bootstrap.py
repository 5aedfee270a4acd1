"""
Application bootstrap helpers (runs during startup).
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from csrms.core.config import Settings
from csrms.core.database import Database
from csrms.models.user import User, UserRole

logger = logging.getLogger(__name__)


async def _ensure_staff_recipient(session: AsyncSession, user_id: str, email: str) -> bool:
    """Insert the staff notification recipient if it is missing."""
    stmt = select(User).where(User.user_id == user_id)
    result = await session.execute(stmt)
    if result.scalar_one_or_none():
        return False

    session.add(
        User(
            user_id=user_id,
            email=email,
            full_name="Municipal staff",
            role=UserRole.STAFF,
        )
    )
    logger.info("Seeded staff notification recipient %s", user_id)
    return True


async def seed_staff_recipient(database: Database, config: Settings) -> bool:
    """
    Ensure the user that receives new-request notifications exists.

    Nothing is seeded unless ``STAFF_EMAIL`` is configured.
    """
    if not config.STAFF_EMAIL:
        logger.warning(
            "STAFF_EMAIL not configured; staff recipient %s will not be seeded",
            config.STAFF_RECIPIENT_ID,
        )
        return False

    async with database.session() as session:
        created = await _ensure_staff_recipient(
            session, config.STAFF_RECIPIENT_ID, config.STAFF_EMAIL
        )
        await session.commit()
    return created
