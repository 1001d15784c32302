"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test basic health check endpoint."""
    response = await client.get("/api/health")

    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert "version" in data
    assert data["environment"] == "test"
    assert data["dependencies"]["database"]["status"] == "healthy"
    # Redis only backs rate limiting, which is off in tests
    assert data["dependencies"]["redis"]["status"] == "disabled"


@pytest.mark.asyncio
async def test_version_endpoint(client: AsyncClient):
    """Test version information endpoint."""
    response = await client.get("/api/version")

    assert response.status_code == 200
    data = response.json()

    assert data["service"] == "hotel-cms"
    assert data["version"] == "1.0.0"
    assert data["environment"] == "test"


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient):
    """Test root endpoint."""
    response = await client.get("/")

    assert response.status_code == 200
    data = response.json()

    assert data["service"] == "hotel-cms"
    assert data["status"] == "running"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client: AsyncClient):
    response = await client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient):
    response = await client.get("/api/version", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"
    assert "X-Process-Time" in response.headers
