"""Async engine and sessions.

One engine (and pool) per process, created lazily from settings and
disposed on shutdown by the application lifespan.
"""

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings


class Base(DeclarativeBase):
    """Declarative base shared by every table."""


@lru_cache
def get_engine() -> AsyncEngine:
    settings = get_settings()
    return create_async_engine(settings.database_url, echo=settings.debug, pool_pre_ping=True)


@lru_cache
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)


async def dispose_engine() -> None:
    """Close pooled connections; the next ``get_engine()`` builds a fresh one."""
    if not get_engine.cache_info().currsize:
        return
    engine = get_engine()
    get_session_maker.cache_clear()
    get_engine.cache_clear()
    await engine.dispose()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session. Commits when the handler returns, rolls back if it raises."""
    async with get_session_maker()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()
