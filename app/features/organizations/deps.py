"""FastAPI dependencies that scope a request to one organization."""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import NotFoundError
from app.core.logging import organization_id_ctx
from app.features.organizations.service import get_demo_organization_id


async def get_organization_id(
    x_organization_id: str | None = Header(
        None,
        min_length=1,
        max_length=36,
        description="Tenant to scope the request to. Falls back to the demo organization.",
    ),
    db: AsyncSession = Depends(get_db),
) -> str:
    """Resolve the organization a request operates on.

    The upstream auth layer is expected to set ``X-Organization-ID``; when it
    is absent the demo organization is used, mirroring users that have not
    joined an organization yet.

    Raises:
        NotFoundError: If no header is given and no demo organization exists.
    """
    organization_id = x_organization_id or await get_demo_organization_id(db)
    if not organization_id:
        raise NotFoundError("No organization found")

    organization_id_ctx.set(organization_id)
    return organization_id
