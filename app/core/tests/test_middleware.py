"""Request id middleware behavior."""

import uuid

import pytest


@pytest.mark.asyncio
async def test_generated_request_id_is_uuid(client):
    """Without a client header a UUID4 is issued."""
    response = await client.get("/health")

    issued = response.headers["X-Request-ID"]
    assert uuid.UUID(issued).version == 4


@pytest.mark.asyncio
async def test_client_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "trace-42"})

    assert response.headers["X-Request-ID"] == "trace-42"


@pytest.mark.asyncio
async def test_each_request_gets_its_own_id(client):
    ids = {(await client.get("/health")).headers["X-Request-ID"] for _ in range(3)}

    assert len(ids) == 3


@pytest.mark.asyncio
async def test_problem_responses_keep_request_id(client):
    """404 problems from the router still carry the correlation header."""
    response = await client.get("/does-not-exist", headers={"X-Request-ID": "abc-123"})

    assert response.status_code == 404
    assert response.headers["X-Request-ID"] == "abc-123"
