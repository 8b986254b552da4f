"""Fixtures for data platform integration tests.

Note: The db_session fixture is duplicated in each feature's conftest.py
because tests in app/features/*/tests/ cannot see fixtures in
tests/conftest.py. Each test gets a fresh in-memory SQLite database.
"""

from datetime import UTC, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base
from app.features.data_platform.models import Customer, Organization


@pytest.fixture
async def db_session():
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
        try:
            yield session
        finally:
            await session.rollback()

    await engine.dispose()


@pytest.fixture
async def sample_organization(db_session: AsyncSession) -> Organization:
    """Create a sample organization."""
    org = Organization(name="Test Org", slug="test-org", plan="PRO")
    db_session.add(org)
    await db_session.commit()
    return org


@pytest.fixture
async def sample_customer(db_session: AsyncSession, sample_organization: Organization) -> Customer:
    """Create a sample customer."""
    customer = Customer(
        organization_id=sample_organization.id,
        name="Acme Co",
        email="a@acme.com",
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )
    db_session.add(customer)
    await db_session.commit()
    return customer
