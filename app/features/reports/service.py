"""Service layer for transaction reports.

Fetches every transaction matching the report filters (no paging, this is
the export path), summarizes them and renders CSV.
"""

import csv
import io
from collections.abc import Iterable, Sequence

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.features.data_platform.models import (
    Customer,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from app.features.reports.schemas import (
    ReportFilters,
    ReportResponse,
    ReportSummary,
    ReportTransaction,
)
from app.shared.utils import day_bounds, isoformat_instant, parse_instant

logger = get_logger(__name__)

CSV_HEADERS = [
    "ID",
    "Customer Name",
    "Customer Email",
    "Amount",
    "Currency",
    "Status",
    "Type",
    "Description",
    "Date",
]

UNKNOWN_CUSTOMER = "Unknown"


def summarize_transactions(transactions: Iterable[ReportTransaction]) -> ReportSummary:
    """Count transactions per status and sum completed revenue in one pass."""
    counts = dict.fromkeys(TransactionStatus, 0)
    total_revenue = 0.0

    for txn in transactions:
        counts[txn.status] += 1
        if txn.status == TransactionStatus.COMPLETED:
            total_revenue += txn.amount

    return ReportSummary(
        total_transactions=sum(counts.values()),
        total_revenue=total_revenue,
        completed_count=counts[TransactionStatus.COMPLETED],
        pending_count=counts[TransactionStatus.PENDING],
        failed_count=counts[TransactionStatus.FAILED],
        refunded_count=counts[TransactionStatus.REFUNDED],
    )


def _csv_fields(txn: ReportTransaction) -> list[str]:
    return [
        txn.id,
        txn.customer_name,
        txn.customer_email,
        f"{txn.amount:.2f}",
        txn.currency,
        txn.status.value,
        txn.type.value,
        txn.description or "",
        isoformat_instant(parse_instant(txn.created_at)),
    ]


def render_csv(
    transactions: Sequence[ReportTransaction],
    standard_quoting: bool = False,
) -> str:
    """Render report transactions as CSV text.

    The default output matches the legacy export byte for byte: Customer
    Name and Description are always wrapped in double quotes, nothing is
    escaped, rows are joined with ``\\n`` and there is no trailing newline.
    A name or description containing ``"`` or ``,`` therefore yields a
    malformed row. ``standard_quoting=True`` switches to RFC 4180 quoting
    (quote only when needed, double embedded quotes) with the same columns
    and line endings.

    Args:
        transactions: Report rows in output order.
        standard_quoting: Use RFC 4180 quoting instead of the legacy format.

    Returns:
        CSV text starting with the header row.
    """
    if standard_quoting:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        writer.writerows(_csv_fields(txn) for txn in transactions)
        return buffer.getvalue().removesuffix("\n")

    lines = [",".join(CSV_HEADERS)]
    for txn in transactions:
        fields = _csv_fields(txn)
        fields[1] = f'"{fields[1]}"'
        fields[7] = f'"{fields[7]}"'
        lines.append(",".join(fields))
    return "\n".join(lines)


class ReportService:
    """Service for building transaction reports.

    Every query is scoped by the organization id carried in the filters.
    """

    async def query_report(
        self,
        db: AsyncSession,
        filters: ReportFilters,
    ) -> ReportResponse:
        """Fetch all matching transactions with their customer and a summary.

        Args:
            db: Database session.
            filters: Tenant scope, optional inclusive date bounds, status, type.

        Returns:
            Every matching transaction, newest first, and the summary.
        """
        conditions: list[ColumnElement[bool]] = [
            Transaction.organization_id == filters.organization_id
        ]

        lower, upper = day_bounds(filters.start_date, filters.end_date)
        if lower is not None:
            conditions.append(Transaction.created_at >= lower)
        if upper is not None:
            conditions.append(Transaction.created_at < upper)
        if filters.status is not None:
            conditions.append(Transaction.status == filters.status.value)
        if filters.type is not None:
            conditions.append(Transaction.type == filters.type.value)

        stmt = (
            select(Transaction, Customer.name, Customer.email)
            .join(Customer, Transaction.customer_id == Customer.id)
            .where(*conditions)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        )
        result = await db.execute(stmt)

        transactions = [
            ReportTransaction(
                id=txn.id,
                amount=float(txn.amount),
                currency=txn.currency,
                status=TransactionStatus(txn.status),
                type=TransactionType(txn.type),
                description=txn.description,
                created_at=isoformat_instant(txn.created_at),
                customer_name=name or UNKNOWN_CUSTOMER,
                customer_email=email,
            )
            for txn, name, email in result.all()
        ]
        summary = summarize_transactions(transactions)

        logger.info(
            "reports.report_queried",
            organization_id=filters.organization_id,
            start_date=str(filters.start_date) if filters.start_date else None,
            end_date=str(filters.end_date) if filters.end_date else None,
            status=filters.status.value if filters.status else None,
            type=filters.type.value if filters.type else None,
            total_transactions=summary.total_transactions,
        )

        return ReportResponse(transactions=transactions, summary=summary)
