"""Tests for shared utilities."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from app.shared.schemas import PaginationParams
from app.shared.utils import (
    as_utc,
    day_bounds,
    isoformat_instant,
    page_count,
    parse_instant,
)


class TestPageCount:
    """Tests for page_count."""

    def test_no_items(self):
        assert page_count(0, 10) == 0

    def test_exact_fit(self):
        assert page_count(20, 10) == 2

    def test_partial_last_page(self):
        assert page_count(21, 10) == 3


class TestInstants:
    """Tests for timestamp helpers."""

    def test_naive_treated_as_utc(self):
        """Naive datetimes are assumed to be UTC."""
        assert as_utc(datetime(2024, 1, 15, 10)) == datetime(2024, 1, 15, 10, tzinfo=UTC)

    def test_offset_converted(self):
        """Aware datetimes are converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2024, 1, 15, 12, tzinfo=plus_two)

        assert as_utc(value).hour == 10

    def test_isoformat_millisecond_precision(self):
        """Microseconds are truncated to milliseconds with a Z suffix."""
        value = datetime(2024, 1, 15, 10, 0, 0, 123999, tzinfo=UTC)

        assert isoformat_instant(value) == "2024-01-15T10:00:00.123Z"

    def test_parse_z_suffix(self):
        """The Z suffix parses as UTC."""
        assert parse_instant("2024-01-15T10:00:00.000Z") == datetime(2024, 1, 15, 10, tzinfo=UTC)


class TestDayBounds:
    """Tests for day_bounds."""

    def test_both_bounds(self):
        """End date maps to midnight of the following day."""
        lower, upper = day_bounds(date(2024, 1, 1), date(2024, 1, 31))

        assert lower == datetime(2024, 1, 1, tzinfo=UTC)
        assert upper == datetime(2024, 2, 1, tzinfo=UTC)

    def test_open_bounds(self):
        """Missing dates give open bounds."""
        assert day_bounds(None, None) == (None, None)


class TestPaginationParams:
    """Tests for PaginationParams."""

    def test_offset_and_limit(self):
        params = PaginationParams(page=3, page_size=20)

        assert params.offset == 40
        assert params.limit == 20

    def test_page_must_be_positive(self):
        with pytest.raises(ValidationError):
            PaginationParams(page=0)
