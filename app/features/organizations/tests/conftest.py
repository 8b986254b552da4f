"""Test fixtures for organizations module."""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base
from app.features.data_platform.models import Organization


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create async session on a fresh in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def demo_organization(db_session: AsyncSession) -> Organization:
    """Organization matching the configured demo slug."""
    org = Organization(name="Acme Corporation", slug="acme-corp", plan="PRO")
    db_session.add(org)
    await db_session.commit()
    return org
