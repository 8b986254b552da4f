"""Tenant resolution for request handlers."""

from app.features.organizations.deps import get_organization_id
from app.features.organizations.service import (
    get_demo_organization_id,
    get_organization_by_slug,
)

__all__ = [
    "get_demo_organization_id",
    "get_organization_by_slug",
    "get_organization_id",
]
