"""RFC 7807 Problem Details bodies.

Every error leaving the API is ``application/problem+json``; the dashboard
shows one generic failure state and quotes ``request_id`` in support tickets.

Reference: https://datatracker.ietf.org/doc/html/rfc7807
"""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.core.logging import request_id_ctx

PROBLEM_MEDIA_TYPE = "application/problem+json"

# Relative type URIs, keyed by machine-readable error code
PROBLEM_TYPES: dict[str, str] = {
    "BAD_REQUEST": "/errors/bad-request",
    "NOT_FOUND": "/errors/not-found",
    "VALIDATION_ERROR": "/errors/validation",
    "DATABASE_ERROR": "/errors/database",
    "INTERNAL_ERROR": "/errors/internal",
}


def problem_type(code: str) -> str:
    """Type URI for an error code; unknown codes get a derived path."""
    return PROBLEM_TYPES.get(code, "/errors/" + code.lower().replace("_", "-"))


class ProblemDetail(BaseModel):
    """Problem body with the ``code``, ``errors`` and ``request_id`` extensions."""

    type: str = "about:blank"
    title: str
    status: int = Field(..., ge=400, le=599)
    detail: str | None = None
    instance: str | None = None
    code: str | None = None
    errors: list[dict[str, Any]] | None = Field(
        None, description="Per-field problems, only on 422 responses."
    )
    request_id: str | None = Field(None, description="Correlation id of the failed request.")


class ProblemDetailResponse(JSONResponse):
    media_type = PROBLEM_MEDIA_TYPE


def problem_response(
    status: int,
    title: str,
    code: str,
    detail: str | None = None,
    errors: list[dict[str, Any]] | None = None,
) -> ProblemDetailResponse:
    """Render a problem for the current request.

    ``instance`` and ``request_id`` are filled from the request context when
    a request id is bound.
    """
    request_id = request_id_ctx.get()
    body = ProblemDetail(
        type=problem_type(code),
        title=title,
        status=status,
        detail=detail,
        instance=f"/requests/{request_id}" if request_id else None,
        code=code,
        errors=errors,
        request_id=request_id,
    )
    return ProblemDetailResponse(status_code=status, content=body.model_dump(exclude_none=True))
