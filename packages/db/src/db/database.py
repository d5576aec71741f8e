# This project was developed with assistance from AI tools.
"""Async engine, session factory, and FastAPI session dependencies."""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import db_settings

logger = logging.getLogger(__name__)

Base = declarative_base()

engine = create_async_engine(
    db_settings.DATABASE_URL,
    echo=db_settings.SQL_ECHO,
    pool_pre_ping=True,
    pool_size=db_settings.POOL_SIZE,
    max_overflow=db_settings.MAX_OVERFLOW,
)

SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class DatabaseService:
    """Connection-level helpers used by health checks and startup."""

    def __init__(self, db_engine=None):
        self._engine = db_engine or engine

    async def health_check(self) -> dict:
        """Run a trivial query and report the server version."""
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(text("SELECT version()"))
                version = result.scalar() or ""
            return {
                "name": "Database",
                "status": "healthy",
                "message": version.split(" on ")[0] if version else "PostgreSQL",
            }
        except Exception as exc:
            logger.warning("Database health check failed: %s", exc)
            return {
                "name": "Database",
                "status": "unhealthy",
                "message": str(exc),
            }

    async def dispose(self) -> None:
        await self._engine.dispose()


_db_service: DatabaseService | None = None


def get_db_service() -> DatabaseService:
    """Return the process-wide DatabaseService."""
    global _db_service  # noqa: PLW0603
    if _db_service is None:
        _db_service = DatabaseService()
    return _db_service


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yield a session, roll back on error."""
    async with SessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
