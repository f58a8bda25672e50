"""
Async engine and session management.

The engine is created lazily on first use and reused for the life of the
process; ``connect_db`` is safe to call any number of times.
"""

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from devevent.core.config import get_settings
from devevent.core.logging import get_logger

logger = get_logger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def connect_db() -> async_sessionmaker[AsyncSession]:
    """Create the engine and session factory, or return the existing ones."""
    global _engine, _session_factory

    if _session_factory is not None:
        return _session_factory

    settings = get_settings()
    engine_kwargs = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if settings.DATABASE_URL.startswith("postgresql"):
        engine_kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )

    _engine = create_async_engine(settings.DATABASE_URL, **engine_kwargs)
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)
    logger.info("database_engine_created", pool_size=settings.DB_POOL_SIZE)
    return _session_factory


async def close_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("database_engine_disposed")
    _engine = None
    _session_factory = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request.

    Repositories commit their own writes; anything left pending when the
    request fails is rolled back here.
    """
    session_factory = connect_db()
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
