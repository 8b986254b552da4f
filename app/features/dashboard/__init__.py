"""Dashboard module: KPI summary, daily chart series, transaction list."""

from app.features.dashboard.routes import router
from app.features.dashboard.schemas import (
    DailySeries,
    KPISummary,
    TransactionFilters,
    TransactionPage,
)
from app.features.dashboard.service import DashboardService

__all__ = [
    "DailySeries",
    "DashboardService",
    "KPISummary",
    "TransactionFilters",
    "TransactionPage",
    "router",
]
