"""Per-request correlation and access logging."""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import get_logger, organization_id_ctx, request_id_ctx

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

CallNext = Callable[[Request], Awaitable[Response]]


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the lifetime of each request.

    A client-supplied ``X-Request-ID`` is reused, otherwise a UUID4 is
    generated. The id is echoed back on the response, including error
    responses rendered by the exception handlers. The tenant context is
    cleared on entry and restored on exit.
    """

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request_token = request_id_ctx.set(request_id)
        tenant_token = organization_id_ctx.set(None)

        path = request.url.path
        logger.info(
            "http.request_started",
            method=request.method,
            path=path,
            query=request.url.query or None,
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "http.request_completed",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(elapsed_ms, 2),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            organization_id_ctx.reset(tenant_token)
            request_id_ctx.reset(request_token)
