"""Reports module: filtered transaction reports and CSV export."""

from app.features.reports.routes import router
from app.features.reports.schemas import (
    ReportFilters,
    ReportResponse,
    ReportSummary,
    ReportTransaction,
)
from app.features.reports.service import ReportService, render_csv, summarize_transactions

__all__ = [
    "ReportFilters",
    "ReportResponse",
    "ReportService",
    "ReportSummary",
    "ReportTransaction",
    "render_csv",
    "router",
    "summarize_transactions",
]
