"""Shared utilities used across features."""

from app.shared.models import StringIdMixin, TimestampMixin
from app.shared.schemas import PaginationParams

__all__ = [
    "PaginationParams",
    "StringIdMixin",
    "TimestampMixin",
]
