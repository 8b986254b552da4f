"""API routes for transaction reports.

``GET /reports`` returns the report as JSON for the reports page;
``GET /reports/export`` streams the same rows as a CSV attachment.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.core.exceptions import BadRequestError
from app.core.logging import get_logger
from app.features.organizations.deps import get_organization_id
from app.features.reports.schemas import ReportFilters, ReportQuery, ReportResponse
from app.features.reports.service import ReportService, render_csv
from app.shared.utils import utc_today

logger = get_logger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def _build_filters(query: ReportQuery, organization_id: str) -> ReportFilters:
    """Bind query filters to the tenant, rejecting inverted date ranges.

    Raises:
        BadRequestError: If end_date is before start_date.
    """
    if query.start_date and query.end_date and query.end_date < query.start_date:
        raise BadRequestError(
            "end_date must be on or after start_date",
            details={"start_date": str(query.start_date), "end_date": str(query.end_date)},
        )
    return ReportFilters(organization_id=organization_id, **query.model_dump())


@router.get(
    "",
    response_model=ReportResponse,
    summary="Transaction report",
    description="""
All transactions matching the filters (no pagination), newest first, with a
summary of counts per status and completed revenue.

**Filtering Options**:
- `start_date` / `end_date`: inclusive calendar days (UTC), each optional
- `status`: COMPLETED, PENDING, FAILED, REFUNDED or `all`
- `type`: PAYMENT, SUBSCRIPTION, ONE_TIME, REFUND or `all`
""",
)
async def get_report(
    query: Annotated[ReportQuery, Query()],
    organization_id: str = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
) -> ReportResponse:
    """Return the filtered report."""
    filters = _build_filters(query, organization_id)
    service = ReportService()
    return await service.query_report(db=db, filters=filters)


@router.get(
    "/export",
    response_class=Response,
    summary="Export transaction report as CSV",
    description="Same filters as `GET /reports`; returns a `text/csv` attachment.",
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_report(
    query: Annotated[ReportQuery, Query()],
    organization_id: str = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Render the filtered report as a downloadable CSV file."""
    settings = get_settings()
    filters = _build_filters(query, organization_id)

    service = ReportService()
    report = await service.query_report(db=db, filters=filters)
    csv_text = render_csv(
        report.transactions,
        standard_quoting=settings.report_csv_standard_quoting,
    )

    filename = f"transactions-report-{utc_today().isoformat()}.csv"
    logger.info(
        "reports.csv_rendered",
        rows=len(report.transactions),
        standard_quoting=settings.report_csv_standard_quoting,
        filename=filename,
    )

    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
