"""Tests for application exceptions and RFC 7807 handlers."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from app.core.exceptions import (
    BadRequestError,
    NotFoundError,
    PulseDashError,
    register_exception_handlers,
)
from app.core.problem_details import PROBLEM_TYPES, problem_type


def test_not_found_error_defaults():
    """NotFoundError maps to 404."""
    exc = NotFoundError()

    assert exc.status_code == 404
    assert exc.code == "NOT_FOUND"
    assert exc.title == "Not Found"


def test_bad_request_error_details():
    """BadRequestError keeps its details."""
    exc = BadRequestError("bad dates", details={"start_date": "2024-02-01"})

    assert exc.status_code == 400
    assert exc.details == {"start_date": "2024-02-01"}
    assert str(exc) == "bad dates"


def test_problem_type_lookup():
    """Known codes use the table, unknown ones derive a path."""
    assert problem_type("DATABASE_ERROR") == PROBLEM_TYPES["DATABASE_ERROR"]
    assert problem_type("RATE_LIMITED") == "/errors/rate-limited"


class TeapotError(PulseDashError):
    status_code = 418
    code = "TEAPOT"
    title = "I'm a teapot"


def _failing_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/missing")
    async def missing():
        raise NotFoundError("No organization found")

    @app.get("/db")
    async def db_failure():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    @app.get("/custom")
    async def custom():
        raise TeapotError("teapot")

    @app.get("/items")
    async def items(page: int):
        return {"page": page}

    return app


@pytest.fixture
async def problem_client():
    """Client for an app whose routes raise on purpose."""
    async with AsyncClient(
        transport=ASGITransport(app=_failing_app()),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.mark.asyncio
async def test_not_found_problem_response(problem_client):
    """Application errors render as problem+json."""
    response = await problem_client.get("/missing")

    assert response.status_code == 404
    assert response.headers["content-type"] == "application/problem+json"
    data = response.json()
    assert data["detail"] == "No organization found"
    assert data["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_database_error_is_generic_500(problem_client):
    """SQLAlchemy failures never leak driver messages."""
    response = await problem_client.get("/db")

    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "DATABASE_ERROR"
    assert "connection refused" not in data["detail"]


@pytest.mark.asyncio
async def test_custom_code_problem(problem_client):
    """Unknown codes still produce a type URI."""
    response = await problem_client.get("/custom")

    assert response.status_code == 418
    assert response.json()["type"] == "/errors/teapot"


@pytest.mark.asyncio
async def test_validation_error_lists_fields(problem_client):
    """Request validation errors are reported per field."""
    response = await problem_client.get("/items", params={"page": "abc"})

    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"][0]["field"] == "query.page"
