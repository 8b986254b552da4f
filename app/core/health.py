"""Liveness and readiness probes."""

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

DatabaseState = Literal["connected", "disconnected"]


class HealthResponse(BaseModel):
    status: Literal["ok", "unhealthy"]
    app_name: str
    app_env: str
    database: DatabaseState | None = None


def _health(database: DatabaseState | None = None) -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="unhealthy" if database == "disconnected" else "ok",
        app_name=settings.app_name,
        app_env=settings.app_env,
        database=database,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Process is up. Does not touch the database."""
    return _health()


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Process is up and ``SELECT 1`` succeeds.

    A database failure is reported in the body with status 200 so load
    balancers can tell a degraded node from a dead one.
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("health.database_unreachable", error=str(exc), error_type=type(exc).__name__)
        return _health("disconnected")
    return _health("connected")
