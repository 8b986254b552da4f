"""Test fixtures for reports module."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.features.data_platform.models import (
    Customer,
    Organization,
    Transaction,
)
from app.main import app

# =============================================================================
# Database Fixtures
# =============================================================================


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
        try:
            yield session
        finally:
            await session.rollback()

    await engine.dispose()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database dependency override."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
async def organization(db_session: AsyncSession) -> Organization:
    """Tenant under test."""
    org = Organization(name="Test Org", slug="test-org", plan="PRO")
    db_session.add(org)
    await db_session.commit()
    return org


@pytest.fixture
async def other_organization(db_session: AsyncSession) -> Organization:
    """A second tenant whose data must never leak."""
    org = Organization(name="Other Org", slug="other-org")
    db_session.add(org)
    await db_session.commit()
    return org


@pytest.fixture
async def customers(db_session: AsyncSession, organization: Organization) -> list[Customer]:
    """Three customers: two named, one without a name."""
    rows = [
        Customer(organization_id=organization.id, name="Acme Co", email="a@acme.com"),
        Customer(organization_id=organization.id, name="Globex", email="billing@globex.com"),
        Customer(organization_id=organization.id, name=None, email="n@nameless.io"),
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return rows


@pytest.fixture
async def transactions(
    db_session: AsyncSession,
    organization: Organization,
    customers: list[Customer],
) -> list[Transaction]:
    """Five transactions on distinct days, returned newest first."""
    acme, globex, nameless = customers
    specs = [
        (acme, "1234.50", "COMPLETED", "PAYMENT", None, datetime(2024, 1, 15, 10, tzinfo=UTC)),
        (globex, "99.00", "PENDING", "SUBSCRIPTION", "Monthly", datetime(2024, 1, 14, tzinfo=UTC)),
        (acme, "10.00", "FAILED", "ONE_TIME", "Retry", datetime(2024, 1, 13, tzinfo=UTC)),
        (nameless, "55.55", "COMPLETED", "PAYMENT", None, datetime(2024, 1, 12, tzinfo=UTC)),
        (globex, "20.00", "REFUNDED", "REFUND", "Refund", datetime(2024, 1, 11, tzinfo=UTC)),
    ]
    rows = [
        Transaction(
            organization_id=organization.id,
            customer_id=customer.id,
            amount=Decimal(amount),
            status=status,
            type=txn_type,
            description=description,
            created_at=created_at,
        )
        for customer, amount, status, txn_type, description, created_at in specs
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return rows
