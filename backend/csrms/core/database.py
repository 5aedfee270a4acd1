"""
Database engine, connection pool and session management.

The engine is owned by a ``Database`` instance that is created during
application startup and disposed on shutdown; services receive it through
FastAPI dependencies instead of importing a module-level engine.
"""

from __future__ import annotations

import logging

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from csrms.core.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_database_url(config: Settings) -> URL:
    """Return an asyncpg URL from ``DATABASE_URL`` or the individual DB_* settings."""
    if config.DATABASE_URL:
        url = make_url(config.DATABASE_URL)
        # Convert postgresql:// to postgresql+asyncpg:// only if not already async
        if url.drivername == "postgresql":
            url = url.set(drivername="postgresql+asyncpg")
        return url

    return URL.create(
        "postgresql+asyncpg",
        username=config.DB_USER,
        password=config.DB_PASSWORD,
        host=config.DB_HOST,
        port=config.DB_PORT,
        database=config.DB_NAME,
    )


class Database:
    """Owns the async engine and hands out sessions bound to its pool."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._sessionmaker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, config: Settings) -> "Database":
        """
        Build the engine with a bounded pool.

        At most ``DB_POOL_SIZE`` connections are open at once; callers beyond
        that wait up to ``DB_POOL_TIMEOUT_SECONDS`` and then receive
        ``sqlalchemy.exc.TimeoutError``. Connections older than
        ``DB_POOL_RECYCLE_SECONDS`` are replaced on checkout.
        """
        url = build_database_url(config)
        if config.ENVIRONMENT == "test":
            engine = create_async_engine(url, poolclass=NullPool)
        else:
            engine = create_async_engine(
                url,
                echo=config.ENVIRONMENT == "development",
                pool_size=config.DB_POOL_SIZE,
                max_overflow=0,
                pool_timeout=config.DB_POOL_TIMEOUT_SECONDS,
                pool_recycle=config.DB_POOL_RECYCLE_SECONDS,
                pool_pre_ping=True,
            )
        return cls(engine)

    def session(self) -> AsyncSession:
        """Return a new session; use it as an async context manager."""
        return self._sessionmaker()

    async def ping(self) -> None:
        """Run a trivial query; raises when the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def connect(self) -> bool:
        """Verify connectivity at startup without failing the process."""
        try:
            await self.ping()
        except Exception as exc:
            logger.error("Error connecting to PostgreSQL: %s", exc)
            return False
        logger.info("Connected to PostgreSQL database")
        return True

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close pooled connections."""
        await self.engine.dispose()
        logger.info("Database connections closed")


def get_database(request: Request) -> Database:
    """Dependency returning the database created during startup."""
    return request.app.state.database
