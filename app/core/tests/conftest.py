"""Fixtures for core tests.

The HTTP client fixture is duplicated from tests/conftest.py because
app/core/tests/ is not below tests/ in the directory tree.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app


@pytest.fixture
async def client():
    """Create async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
