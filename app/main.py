"""ASGI entry point: ``uvicorn app.main:app``."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, get_settings
from app.core.database import dispose_engine
from app.core.exceptions import register_exception_handlers
from app.core.health import router as health_router
from app.core.logging import configure_logging, get_logger
from app.core.middleware import REQUEST_ID_HEADER, RequestIdMiddleware
from app.features.dashboard.routes import router as dashboard_router
from app.features.reports.routes import router as reports_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup and release pooled connections on shutdown."""
    configure_logging()
    settings = get_settings()
    logger.info("app.started", app_name=settings.app_name, app_env=settings.app_env)
    try:
        yield
    finally:
        await dispose_engine()
        logger.info("app.stopped")


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    # Starlette wraps in reverse order: RequestIdMiddleware runs outermost
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Content-Disposition"],
    )
    app.add_middleware(RequestIdMiddleware)


def create_app() -> FastAPI:
    """Build the API: middleware, problem+json handlers and feature routers."""
    settings = get_settings()
    interactive_docs = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant revenue, user and transaction analytics",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if interactive_docs else None,
        redoc_url="/redoc" if interactive_docs else None,
    )
    _add_middleware(app, settings)
    register_exception_handlers(app)

    for router in (health_router, dashboard_router, reports_router):
        app.include_router(router)

    return app


app = create_app()
