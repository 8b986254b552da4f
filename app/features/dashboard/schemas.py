"""Pydantic schemas for dashboard endpoints.

KPI summary, daily chart series and the paged transaction list.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.features.data_platform.models import TransactionStatus, TransactionType
from app.shared.schemas import PaginationParams

# =============================================================================
# KPI Summary
# =============================================================================


class KPISummary(BaseModel):
    """Headline KPIs for the rolling window and their period-over-period change.

    All ``*_change`` values are percentages. A change is 0 whenever the
    previous window value is 0 or less, so "no prior data" and "no change"
    look the same.
    """

    revenue: float = Field(..., description="Revenue summed over the current window.")
    revenue_change: float = Field(..., description="Percent change vs previous window.")
    active_users: int = Field(
        ...,
        ge=0,
        description="Active-user sum divided by the window length, rounded. "
        "Approximates average daily active users.",
    )
    active_users_change: float = Field(..., description="Percent change vs previous window.")
    conversion_rate: float = Field(..., description="Average daily conversion rate (%).")
    conversion_change: float = Field(..., description="Percent change vs previous window.")
    churn_rate: float = Field(
        ...,
        description="Churned customers / (total customers / window length) * 100.",
    )
    churn_change: float = Field(..., description="Percent change vs previous window.")


# =============================================================================
# Daily Series
# =============================================================================


class DailySeriesPoint(BaseModel):
    """One charted day."""

    date: str = Field(..., description="Calendar day, YYYY-MM-DD.")
    revenue: float = Field(..., description="Revenue for the day.")
    active_users: int = Field(..., ge=0, description="Daily active users.")


class DailySeries(BaseModel):
    """Daily revenue and active users ordered by ascending date."""

    points: list[DailySeriesPoint] = Field(..., description="Days with data, oldest first.")
    start_date: date = Field(..., description="First day of the window (inclusive).")
    end_date: date = Field(..., description="Last day of the window (inclusive).")
    days: int = Field(..., ge=1, description="Lookback window length in days.")


# =============================================================================
# Transactions
# =============================================================================


class TransactionQuery(PaginationParams):
    """Query-string filters for the paged dashboard transaction list.

    ``status="all"`` is treated exactly like an omitted status.
    """

    search: str | None = Field(
        None,
        max_length=200,
        description="Case-insensitive substring matched against customer name or email.",
    )
    status: TransactionStatus | None = Field(None, description="Exact status match.")

    @field_validator("status", mode="before")
    @classmethod
    def normalize_all_status(cls, v: object) -> object:
        """Map the ``all`` sentinel (and empty strings) to no filter."""
        if isinstance(v, str) and v.strip().lower() in {"", "all"}:
            return None
        return v

    @field_validator("search")
    @classmethod
    def normalize_search(cls, v: str | None) -> str | None:
        """Drop blank search terms."""
        if v is None or not v.strip():
            return None
        return v.strip()


class TransactionFilters(TransactionQuery):
    """Transaction list filters bound to one organization."""

    organization_id: str = Field(..., min_length=1, description="Tenant scope (required).")


class CustomerRef(BaseModel):
    """Customer fields projected into a transaction row."""

    model_config = ConfigDict(from_attributes=True)

    name: str | None = Field(None, description="Customer name.")
    email: str = Field(..., description="Customer email.")


class TransactionItem(BaseModel):
    """A transaction as displayed on the dashboard."""

    id: str
    amount: float = Field(..., description="Amount converted to float for display.")
    currency: str
    status: TransactionStatus
    type: TransactionType
    description: str | None = None
    created_at: str = Field(..., description="ISO-8601 instant, e.g. 2024-01-15T10:00:00.000Z.")
    customer: CustomerRef


class TransactionPage(BaseModel):
    """One page of transactions plus the total match count."""

    transactions: list[TransactionItem]
    total_count: int = Field(..., ge=0, description="Total matches across all pages.")
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    pages: int = Field(..., ge=0, description="Total number of pages.")
