"""Tests for application wiring."""

import pytest

from app.main import app, create_app


def test_routes_registered():
    """Every public endpoint is mounted."""
    paths = {route.path for route in app.routes}

    assert {
        "/health",
        "/health/ready",
        "/dashboard/kpis",
        "/dashboard/series",
        "/dashboard/transactions",
        "/reports",
        "/reports/export",
    } <= paths


def test_create_app_uses_settings_title():
    """The OpenAPI title comes from settings."""
    assert create_app().title == "PulseDash"


@pytest.mark.asyncio
async def test_cors_preflight_allows_dev_origin(client):
    """Development CORS allows the local frontend to GET."""
    response = await client.options(
        "/health",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


@pytest.mark.asyncio
async def test_openapi_documents_organization_header(client):
    """Tenant header shows up on dashboard operations."""
    response = await client.get("/openapi.json")

    assert response.status_code == 200
    params = response.json()["paths"]["/dashboard/kpis"]["get"]["parameters"]
    assert any(p["name"] == "x-organization-id" and p["in"] == "header" for p in params)
