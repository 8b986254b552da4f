"""Application errors and the FastAPI handlers that render them.

Services never catch data-store failures; they surface here and become
RFC 7807 problems (see ``app.core.problem_details``).
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.core.logging import get_logger
from app.core.problem_details import ProblemDetailResponse, problem_response

logger = get_logger(__name__)


class PulseDashError(Exception):
    """Base for errors that map onto one HTTP status and error code.

    Subclasses only override the class attributes.
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    title: str = "Internal Server Error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(PulseDashError):
    """Nothing to serve, e.g. no organization could be resolved."""

    status_code = 404
    code = "NOT_FOUND"
    title = "Not Found"
    default_message = "Resource not found"


class BadRequestError(PulseDashError):
    """Parameters that are individually valid but contradict each other."""

    status_code = 400
    code = "BAD_REQUEST"
    title = "Bad Request"
    default_message = "Bad request"


async def pulsedash_exception_handler(
    _request: Request,
    exc: PulseDashError,
) -> ProblemDetailResponse:
    """Render an application error; client errors log at warning level."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "app.error_handled",
        error=exc.message,
        error_type=type(exc).__name__,
        error_code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
    )
    return problem_response(exc.status_code, exc.title, exc.code, detail=exc.message)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> ProblemDetailResponse:
    """Report request validation failures field by field.

    Field paths join the error location with dots, e.g. ``query.status``.
    """
    field_errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": str(error.get("msg", "Validation failed")),
            "type": str(error.get("type", "unknown")),
        }
        for error in exc.errors()
    ]

    logger.warning(
        "app.validation_error",
        path=request.url.path,
        fields=[e["field"] for e in field_errors],
    )

    return problem_response(
        422,
        "Validation Error",
        "VALIDATION_ERROR",
        detail=f"{len(field_errors)} invalid request parameter(s); see 'errors'.",
        errors=field_errors,
    )


async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError,
) -> ProblemDetailResponse:
    """Turn a data-store failure into a generic 500 without driver details."""
    logger.error(
        "app.database_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )
    return problem_response(
        500,
        "Database Error",
        "DATABASE_ERROR",
        detail="Something went wrong while reading data. Please try again later.",
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> ProblemDetailResponse:
    """Last resort for anything not handled above."""
    logger.error(
        "app.unhandled_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )
    return problem_response(
        500,
        "Internal Server Error",
        "INTERNAL_ERROR",
        detail="An unexpected error occurred. Quote the request_id when contacting support.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every handler in this module to ``app``."""
    handlers: list[tuple[type[Exception], Any]] = [
        (PulseDashError, pulsedash_exception_handler),
        (RequestValidationError, validation_exception_handler),
        (SQLAlchemyError, database_exception_handler),
        (Exception, unhandled_exception_handler),
    ]
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, handler)
