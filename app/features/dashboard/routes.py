"""API routes for dashboard endpoints.

These endpoints back the dashboard page: KPI cards, the revenue chart and
the recent transactions table. All are scoped to the organization resolved
from the ``X-Organization-ID`` header.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.features.dashboard.schemas import (
    DailySeries,
    KPISummary,
    TransactionFilters,
    TransactionPage,
    TransactionQuery,
)
from app.features.dashboard.service import DashboardService
from app.features.organizations.deps import get_organization_id

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


# =============================================================================
# KPI Endpoints
# =============================================================================


@router.get(
    "/kpis",
    response_model=KPISummary,
    summary="Headline KPIs",
    description="""
Revenue, active users, conversion and churn for the last N days (today
included), each with its percent change against the N days before. N is
the `DASHBOARD_WINDOW_DAYS` setting (default 30).

**Notes**:
- A change is reported as 0 when the previous window value is 0.
- `active_users` is the active-user sum divided by N, rounded.
- `churn_rate` is churned / (total customers / N) * 100.
""",
)
async def get_kpis(
    organization_id: str = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
) -> KPISummary:
    """Compute the KPI summary for the current organization."""
    service = DashboardService()
    return await service.compute_kpi_summary(db=db, organization_id=organization_id)


@router.get(
    "/series",
    response_model=DailySeries,
    summary="Daily revenue and active users",
    description="Daily points for the last `days` days (inclusive of today), oldest first.",
)
async def get_series(
    days: int = Query(
        get_settings().dashboard_series_default_days,
        ge=1,
        le=get_settings().dashboard_series_max_days,
        description="Lookback window in days.",
    ),
    organization_id: str = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
) -> DailySeries:
    """Return the daily chart series."""
    service = DashboardService()
    return await service.compute_daily_series(db=db, organization_id=organization_id, days=days)


# =============================================================================
# Transaction Endpoints
# =============================================================================


@router.get(
    "/transactions",
    response_model=TransactionPage,
    summary="List transactions",
    description="""
Newest-first transactions with offset pagination.

**Filtering Options**:
- `search`: case-insensitive substring of customer name or email
- `status`: COMPLETED, PENDING, FAILED, REFUNDED or `all` (no filter)
""",
)
async def list_transactions(
    query: Annotated[TransactionQuery, Query()],
    organization_id: str = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
) -> TransactionPage:
    """Return one page of filtered transactions."""
    filters = TransactionFilters(organization_id=organization_id, **query.model_dump())
    service = DashboardService()
    return await service.query_transactions(db=db, filters=filters)
