"""structlog setup.

Log events are flat key/value records. Every event emitted while a request
is in flight carries ``request_id``, and ``organization_id`` once the tenant
has been resolved.
"""

import logging
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.types import Processor, WrappedLogger

from app.core.config import get_settings

EventDict = MutableMapping[str, Any]

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
organization_id_ctx: ContextVar[str | None] = ContextVar("organization_id", default=None)


def _bind_from(var: ContextVar[str | None], key: str) -> Processor:
    """Processor copying ``var`` into the event unless the caller passed ``key``."""

    def processor(_logger: WrappedLogger, _method_name: str, event_dict: EventDict) -> EventDict:
        value = var.get()
        if value:
            event_dict.setdefault(key, value)
        return event_dict

    processor.__name__ = f"add_{key}"
    return processor


add_request_id = _bind_from(request_id_ctx, "request_id")
add_organization_id = _bind_from(organization_id_ctx, "organization_id")


def configure_logging() -> None:
    """Install the processor chain picked by ``log_format`` and ``log_level``."""
    settings = get_settings()

    renderer: Processor
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    min_level = logging.getLevelName(settings.log_level)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            add_request_id,
            add_organization_id,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Module logger; pass ``__name__``."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
