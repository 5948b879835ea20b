"""Tests for health endpoints and cross-cutting middleware."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.main import app


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "PEPS Ledger"


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "uptime_seconds" in data


async def test_db_health_unavailable(client):
    with patch(
        "src.infrastructure.storage.sqlite.get_pool",
        AsyncMock(side_effect=RuntimeError("disk gone")),
    ):
        response = await client.get("/api/health/db")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"]["available"] is False
    assert "disk gone" in data["database"]["error"]


async def test_db_health_available(client):
    conn = MagicMock()
    conn.execute = AsyncMock()
    pool = MagicMock()
    pool.acquire.return_value.__aenter__ = AsyncMock(return_value=conn)
    pool.acquire.return_value.__aexit__ = AsyncMock(return_value=None)

    with patch("src.infrastructure.storage.sqlite.get_pool", AsyncMock(return_value=pool)):
        response = await client.get("/api/health/db")

    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"]["name"] == "sqlite"


async def test_request_id_echoed(client):
    response = await client.get("/api/health", headers={"X-Request-ID": "scan-42"})
    assert response.headers["X-Request-ID"] == "scan-42"
    assert response.headers["X-Response-Time"].endswith("ms")


async def test_request_id_generated(client):
    response = await client.get("/api/health")
    assert len(response.headers["X-Request-ID"]) == 8


async def test_unknown_route_uses_error_format(client):
    response = await client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"
