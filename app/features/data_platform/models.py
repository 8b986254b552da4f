"""Data platform ORM models for the multi-tenant analytics store.

Tables:
- Tenant: Organization
- Dimensions: Customer
- Facts: Transaction (one row per financial event), DailyMetric (pre-aggregated)

Every table except organization carries organization_id; queries against
them must always filter on it.

Grain: DailyMetric uniquely keyed by (organization_id, date).
"""

import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.shared.models import StringIdMixin, TimestampMixin

# ============================================================================
# ENUMS
# ============================================================================


class TransactionStatus(str, Enum):
    """Lifecycle status of a transaction."""

    COMPLETED = "COMPLETED"
    PENDING = "PENDING"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class TransactionType(str, Enum):
    """Kind of financial event."""

    PAYMENT = "PAYMENT"
    SUBSCRIPTION = "SUBSCRIPTION"
    ONE_TIME = "ONE_TIME"
    REFUND = "REFUND"


class CustomerStatus(str, Enum):
    """Customer account status."""

    ACTIVE = "ACTIVE"
    CHURNED = "CHURNED"
    TRIAL = "TRIAL"


def _in_check(column: str, enum_cls: type[Enum]) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"


# ============================================================================
# TENANT
# ============================================================================


class Organization(StringIdMixin, TimestampMixin, Base):
    """Tenant boundary.

    Attributes:
        id: UUID primary key.
        name: Display name.
        slug: Unique URL-safe identifier (e.g. "acme-corp").
        plan: Subscription plan name.
    """

    __tablename__ = "organization"

    name: Mapped[str] = mapped_column(String(100))
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    plan: Mapped[str] = mapped_column(String(20), default="FREE")

    customers: Mapped[list["Customer"]] = relationship(back_populates="organization")
    transactions: Mapped[list["Transaction"]] = relationship(back_populates="organization")
    daily_metrics: Mapped[list["DailyMetric"]] = relationship(back_populates="organization")


# ============================================================================
# DIMENSIONS
# ============================================================================


class Customer(StringIdMixin, TimestampMixin, Base):
    """Customer of an organization.

    Attributes:
        id: UUID primary key.
        organization_id: Owning tenant.
        name: Customer display name (may be missing).
        email: Contact email, unique per organization.
        status: ACTIVE, CHURNED or TRIAL.
        monthly_revenue: Recurring revenue attributed to the customer.
        churned_at: When the customer churned, if ever.
    """

    __tablename__ = "customer"

    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organization.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    email: Mapped[str] = mapped_column(String(255))
    status: Mapped[str] = mapped_column(String(20), default=CustomerStatus.ACTIVE.value)
    monthly_revenue: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    churned_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    organization: Mapped["Organization"] = relationship(back_populates="customers")
    transactions: Mapped[list["Transaction"]] = relationship(back_populates="customer")

    __table_args__ = (
        UniqueConstraint("organization_id", "email", name="uq_customer_org_email"),
        CheckConstraint(_in_check("status", CustomerStatus), name="ck_customer_valid_status"),
    )


# ============================================================================
# FACT TABLES
# ============================================================================


class Transaction(StringIdMixin, TimestampMixin, Base):
    """Financial event fact table. Rows are immutable once written.

    created_at (from TimestampMixin) is the event time used for ordering
    and date filtering.

    Attributes:
        id: UUID primary key.
        organization_id: Owning tenant.
        customer_id: Paying customer.
        amount: Fixed-point currency amount.
        currency: ISO 4217 code.
        status: COMPLETED, PENDING, FAILED or REFUNDED.
        type: PAYMENT, SUBSCRIPTION, ONE_TIME or REFUND.
        description: Free text (optional).
    """

    __tablename__ = "transaction"

    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organization.id", ondelete="CASCADE"), index=True
    )
    customer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("customer.id", ondelete="CASCADE"), index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    status: Mapped[str] = mapped_column(String(20), default=TransactionStatus.PENDING.value)
    type: Mapped[str] = mapped_column(String(20), default=TransactionType.PAYMENT.value)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    organization: Mapped["Organization"] = relationship(back_populates="transactions")
    customer: Mapped["Customer"] = relationship(back_populates="transactions")

    __table_args__ = (
        # Dashboard list and report export both filter by tenant and order by time
        Index("ix_transaction_org_created", "organization_id", "created_at"),
        Index("ix_transaction_org_status", "organization_id", "status"),
        CheckConstraint(
            _in_check("status", TransactionStatus), name="ck_transaction_valid_status"
        ),
        CheckConstraint(_in_check("type", TransactionType), name="ck_transaction_valid_type"),
    )


class DailyMetric(TimestampMixin, Base):
    """Pre-aggregated daily metrics per organization.

    CRITICAL: Grain is (organization_id, date). Rows are written by an
    external aggregation job (or the demo seeder) and only read here.

    Attributes:
        id: Surrogate primary key.
        organization_id: Owning tenant.
        date: Calendar day.
        revenue: Completed revenue for the day.
        transaction_count: Completed transactions for the day.
        active_users: Daily active users.
        new_users: Users who signed up that day.
        total_customers: Customer count at end of day.
        new_customers: Customers acquired that day.
        churned_customers: Customers lost that day.
        conversion_rate: Conversion percentage for the day.
    """

    __tablename__ = "daily_metric"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organization.id", ondelete="CASCADE"), index=True
    )
    date: Mapped[datetime.date] = mapped_column(Date, index=True)
    revenue: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    transaction_count: Mapped[int] = mapped_column(Integer, default=0)
    active_users: Mapped[int] = mapped_column(Integer, default=0)
    new_users: Mapped[int] = mapped_column(Integer, default=0)
    total_customers: Mapped[int] = mapped_column(Integer, default=0)
    new_customers: Mapped[int] = mapped_column(Integer, default=0)
    churned_customers: Mapped[int] = mapped_column(Integer, default=0)
    conversion_rate: Mapped[Decimal] = mapped_column(Numeric(6, 3), default=Decimal("0"))

    organization: Mapped["Organization"] = relationship(back_populates="daily_metrics")

    __table_args__ = (
        UniqueConstraint("organization_id", "date", name="uq_daily_metric_grain"),
        CheckConstraint("revenue >= 0", name="ck_daily_metric_revenue_positive"),
        CheckConstraint("active_users >= 0", name="ck_daily_metric_active_users_positive"),
        CheckConstraint(
            "churned_customers >= 0", name="ck_daily_metric_churned_positive"
        ),
    )
