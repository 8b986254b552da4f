"""Shared utility functions."""

import math
from datetime import UTC, date, datetime, time, timedelta


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed to show ``total`` items.

    Args:
        total: Total count of all items.
        page_size: Items per page.

    Returns:
        Page count, 0 when there are no items.
    """
    return math.ceil(total / page_size) if total > 0 else 0


def as_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC, treating naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def isoformat_instant(value: datetime) -> str:
    """Render a timestamp as an ISO-8601 instant with millisecond precision.

    Example: ``2024-01-15T10:00:00.000Z``.
    """
    utc_value = as_utc(value)
    return utc_value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_value.microsecond // 1000:03d}Z"


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into an aware datetime."""
    return as_utc(datetime.fromisoformat(value))


def day_bounds(
    start_date: date | None,
    end_date: date | None,
) -> tuple[datetime | None, datetime | None]:
    """Convert inclusive calendar-day bounds into a half-open UTC datetime range.

    Args:
        start_date: First day included (optional).
        end_date: Last day included (optional).

    Returns:
        ``(lower, upper)`` where ``lower`` is midnight of ``start_date`` and
        ``upper`` is midnight after ``end_date``; either may be None.
    """
    lower = datetime.combine(start_date, time.min, tzinfo=UTC) if start_date else None
    upper = (
        datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=UTC)
        if end_date
        else None
    )
    return lower, upper


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(UTC).date()
