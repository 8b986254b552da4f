"""Service layer for dashboard operations.

Provides the headline KPI summary, the daily chart series and the paged
transaction list. KPIs read only the pre-aggregated daily_metric table, so
their cost grows with the number of days, never with transaction volume.
"""

from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.logging import get_logger
from app.features.dashboard.schemas import (
    CustomerRef,
    DailySeries,
    DailySeriesPoint,
    KPISummary,
    TransactionFilters,
    TransactionItem,
    TransactionPage,
)
from app.features.data_platform.models import (
    Customer,
    DailyMetric,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from app.shared.utils import isoformat_instant, page_count, utc_today

logger = get_logger(__name__)


@dataclass(frozen=True)
class WindowAggregate:
    """Sums and averages of daily_metric rows over one date window."""

    revenue: float = 0.0
    active_users: int = 0
    churned_customers: int = 0
    total_customers: int = 0
    conversion_rate: float = 0.0


def percent_change(current: float, previous: float) -> float:
    """Percent change from ``previous`` to ``current``.

    Returns 0 when ``previous`` is zero or negative instead of dividing.
    """
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def churn_rate(churned: int, total_customers: int, window_days: int) -> float:
    """Approximate daily churn rate in percent.

    The customer total is a sum over the window, so dividing it by the
    window length amortizes it to a per-day base. A zero total counts as 1.
    """
    base = total_customers or 1
    return churned / (base / window_days) * 100


def build_kpi_summary(
    current: WindowAggregate,
    previous: WindowAggregate,
    window_days: int,
) -> KPISummary:
    """Derive the KPI summary from two window aggregates.

    Args:
        current: Aggregate of the current window.
        previous: Aggregate of the immediately preceding window.
        window_days: Window length, also the divisor for average active users.

    Returns:
        KPI values with their period-over-period changes.
    """
    current_active = current.active_users / window_days
    previous_active = previous.active_users / window_days

    current_churn = churn_rate(current.churned_customers, current.total_customers, window_days)
    previous_churn = churn_rate(
        previous.churned_customers, previous.total_customers, window_days
    )

    return KPISummary(
        revenue=current.revenue,
        revenue_change=percent_change(current.revenue, previous.revenue),
        active_users=round(current_active),
        active_users_change=percent_change(current_active, previous_active),
        conversion_rate=current.conversion_rate,
        conversion_change=percent_change(current.conversion_rate, previous.conversion_rate),
        churn_rate=current_churn,
        churn_change=percent_change(current_churn, previous_churn),
    )


def like_pattern(term: str) -> str:
    """Wrap a search term for substring LIKE matching, escaping wildcards."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class DashboardService:
    """Service for dashboard KPIs, chart data and transaction listing.

    Every method takes the organization id (directly or inside the filters
    model) and every statement filters on it.
    """

    def __init__(self) -> None:
        """Initialize dashboard service."""
        self.settings = get_settings()

    async def _aggregate_window(
        self,
        db: AsyncSession,
        organization_id: str,
        first_day: date,
        last_day: date,
    ) -> WindowAggregate:
        """Sum and average daily metrics for one window.

        Args:
            db: Database session.
            organization_id: Tenant scope.
            first_day: First day of the window (inclusive).
            last_day: Last day of the window (inclusive).

        Returns:
            Window aggregate with zeros where no rows exist.
        """
        stmt = select(
            func.coalesce(func.sum(DailyMetric.revenue), 0).label("revenue"),
            func.coalesce(func.sum(DailyMetric.active_users), 0).label("active_users"),
            func.coalesce(func.sum(DailyMetric.churned_customers), 0).label("churned_customers"),
            func.coalesce(func.sum(DailyMetric.total_customers), 0).label("total_customers"),
            func.coalesce(func.avg(DailyMetric.conversion_rate), 0).label("conversion_rate"),
        ).where(
            DailyMetric.organization_id == organization_id,
            DailyMetric.date >= first_day,
            DailyMetric.date <= last_day,
        )

        result = await db.execute(stmt)
        row = result.one()

        return WindowAggregate(
            revenue=float(row.revenue),
            active_users=int(row.active_users),
            churned_customers=int(row.churned_customers),
            total_customers=int(row.total_customers),
            conversion_rate=float(row.conversion_rate),
        )

    async def compute_kpi_summary(
        self,
        db: AsyncSession,
        organization_id: str,
        today: date | None = None,
    ) -> KPISummary:
        """Compute headline KPIs and their period-over-period changes.

        Both windows hold N calendar days, N being ``dashboard_window_days``:
        current is (today - N, today] and previous is (today - 2N, today - N].

        Args:
            db: Database session.
            organization_id: Tenant scope.
            today: Reference day (defaults to the current UTC date).

        Returns:
            KPI summary.
        """
        window_days = self.settings.dashboard_window_days
        today = today or utc_today()
        previous_end = today - timedelta(days=window_days)
        current_start = previous_end + timedelta(days=1)
        previous_start = current_start - timedelta(days=window_days)

        # One AsyncSession cannot run statements concurrently; issue them in turn
        current = await self._aggregate_window(db, organization_id, current_start, today)
        previous = await self._aggregate_window(db, organization_id, previous_start, previous_end)

        summary = build_kpi_summary(current, previous, window_days)

        logger.info(
            "dashboard.kpis_computed",
            organization_id=organization_id,
            today=str(today),
            window_days=window_days,
            revenue=summary.revenue,
            revenue_change=summary.revenue_change,
        )

        return summary

    async def compute_daily_series(
        self,
        db: AsyncSession,
        organization_id: str,
        days: int | None = None,
        today: date | None = None,
    ) -> DailySeries:
        """Daily revenue and active users for charting.

        Args:
            db: Database session.
            organization_id: Tenant scope.
            days: Lookback window (defaults to ``dashboard_series_default_days``).
            today: Reference day (defaults to the current UTC date).

        Returns:
            Points for [today - days, today] ordered by ascending date.
        """
        if days is None:
            days = self.settings.dashboard_series_default_days
        today = today or utc_today()
        start_date = today - timedelta(days=days)

        stmt = (
            select(DailyMetric.date, DailyMetric.revenue, DailyMetric.active_users)
            .where(
                DailyMetric.organization_id == organization_id,
                DailyMetric.date >= start_date,
                DailyMetric.date <= today,
            )
            .order_by(DailyMetric.date.asc())
        )

        result = await db.execute(stmt)
        points = [
            DailySeriesPoint(
                date=row.date.isoformat(),
                revenue=float(row.revenue),
                active_users=int(row.active_users),
            )
            for row in result.all()
        ]

        logger.info(
            "dashboard.series_computed",
            organization_id=organization_id,
            days=days,
            points=len(points),
        )

        return DailySeries(points=points, start_date=start_date, end_date=today, days=days)

    async def query_transactions(
        self,
        db: AsyncSession,
        filters: TransactionFilters,
    ) -> TransactionPage:
        """Filter, count and page the organization's transactions.

        Offset pagination is fine up to roughly 100k rows per tenant; past
        that, deep pages get slow because the database still walks the
        skipped rows.

        Args:
            db: Database session.
            filters: Tenant scope, optional status and search, page settings.

        Returns:
            One page ordered newest first, plus the total match count.
        """
        page_size = min(filters.page_size, self.settings.transactions_max_page_size)
        paging = filters.model_copy(update={"page_size": page_size})

        conditions: list[ColumnElement[bool]] = [
            Transaction.organization_id == filters.organization_id
        ]
        if filters.status is not None:
            conditions.append(Transaction.status == filters.status.value)
        if filters.search:
            pattern = like_pattern(filters.search)
            conditions.append(
                or_(
                    Customer.name.ilike(pattern, escape="\\"),
                    Customer.email.ilike(pattern, escape="\\"),
                )
            )

        count_stmt = (
            select(func.count())
            .select_from(Transaction)
            .join(Customer, Transaction.customer_id == Customer.id)
            .where(*conditions)
        )
        total_count = int((await db.execute(count_stmt)).scalar_one())

        # id breaks created_at ties so consecutive pages never overlap
        rows_stmt = (
            select(Transaction, Customer.name, Customer.email)
            .join(Customer, Transaction.customer_id == Customer.id)
            .where(*conditions)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .offset(paging.offset)
            .limit(paging.limit)
        )
        result = await db.execute(rows_stmt)

        transactions = [
            TransactionItem(
                id=txn.id,
                amount=float(txn.amount),
                currency=txn.currency,
                status=TransactionStatus(txn.status),
                type=TransactionType(txn.type),
                description=txn.description,
                created_at=isoformat_instant(txn.created_at),
                customer=CustomerRef(name=name, email=email),
            )
            for txn, name, email in result.all()
        ]

        logger.info(
            "dashboard.transactions_queried",
            organization_id=filters.organization_id,
            status=filters.status.value if filters.status else None,
            search=filters.search,
            page=filters.page,
            page_size=page_size,
            total_count=total_count,
        )

        return TransactionPage(
            transactions=transactions,
            total_count=total_count,
            page=filters.page,
            page_size=page_size,
            pages=page_count(total_count, page_size),
        )
