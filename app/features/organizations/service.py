"""Service layer for resolving the tenant of a request."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.logging import get_logger
from app.features.data_platform.models import Organization

logger = get_logger(__name__)


async def get_organization_by_slug(db: AsyncSession, slug: str) -> Organization | None:
    """Look up an organization by its unique slug.

    Args:
        db: Database session.
        slug: Organization slug.

    Returns:
        The organization, or None if no row matches.
    """
    result = await db.execute(select(Organization).where(Organization.slug == slug))
    return result.scalar_one_or_none()


async def get_demo_organization_id(db: AsyncSession) -> str | None:
    """Id of the configured demo organization, used when no tenant is supplied."""
    settings = get_settings()
    organization = await get_organization_by_slug(db, settings.demo_organization_slug)
    if organization is None:
        logger.warning(
            "organizations.demo_missing",
            slug=settings.demo_organization_slug,
        )
        return None
    return organization.id
