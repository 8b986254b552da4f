"""Pydantic schemas for transaction reports and CSV export."""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from app.features.data_platform.models import TransactionStatus, TransactionType


def _none_if_all(v: object) -> object:
    if isinstance(v, str) and v.strip().lower() in {"", "all"}:
        return None
    return v


class ReportQuery(BaseModel):
    """Query-string filters for a report. ``all`` means no filter."""

    start_date: date | None = Field(
        None,
        description="First day included (inclusive, UTC). Format: YYYY-MM-DD.",
    )
    end_date: date | None = Field(
        None,
        description="Last day included (inclusive, UTC). Format: YYYY-MM-DD.",
    )
    status: TransactionStatus | None = Field(None, description="Exact status match.")
    type: TransactionType | None = Field(None, description="Exact type match.")

    @field_validator("status", "type", mode="before")
    @classmethod
    def normalize_all(cls, v: object) -> object:
        """Map the ``all`` sentinel (and empty strings) to no filter."""
        return _none_if_all(v)


class ReportFilters(ReportQuery):
    """Report filters bound to one organization."""

    organization_id: str = Field(..., min_length=1, description="Tenant scope (required).")


class ReportTransaction(BaseModel):
    """A transaction row in a report, flattened with its customer."""

    id: str
    amount: float
    currency: str
    status: TransactionStatus
    type: TransactionType
    description: str | None = None
    created_at: str = Field(..., description="ISO-8601 instant, e.g. 2024-01-15T10:00:00.000Z.")
    customer_name: str = Field(..., description="Customer name, 'Unknown' when missing.")
    customer_email: str


class ReportSummary(BaseModel):
    """Totals over every transaction in the report.

    The four status counts add up to ``total_transactions``.
    """

    total_transactions: int = Field(0, ge=0)
    total_revenue: float = Field(0.0, description="Sum of COMPLETED amounts.")
    completed_count: int = Field(0, ge=0)
    pending_count: int = Field(0, ge=0)
    failed_count: int = Field(0, ge=0)
    refunded_count: int = Field(0, ge=0)


class ReportResponse(BaseModel):
    """Full (unpaged) report with summary."""

    transactions: list[ReportTransaction]
    summary: ReportSummary
