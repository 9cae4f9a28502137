"""Integration tests for health endpoints and request plumbing."""

import pytest
from sqlalchemy.exc import OperationalError

from collabportal.infrastructure.persistence.repositories import UserRepository


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "CollabPortal"


@pytest.mark.asyncio
async def test_liveness(client):
    response = await client.get("/live")
    assert response.status_code == 200
    assert response.json()["status"] == "alive"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "cid_test123"})
    assert response.headers["X-Correlation-ID"] == "cid_test123"


@pytest.mark.asyncio
async def test_correlation_id_is_generated(client):
    response = await client.get("/health")
    assert response.headers["X-Correlation-ID"].startswith("cid_")


@pytest.mark.asyncio
async def test_unknown_route_uses_error_shape(client):
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_store_failure_reports_underlying_message(client, admin_headers, monkeypatch):
    async def failing_list(self, role):
        raise OperationalError("SELECT users", {}, Exception("disk I/O error"))

    monkeypatch.setattr(UserRepository, "list_by_role", failing_list)

    response = await client.get("/api/admin/users", headers=admin_headers)

    assert response.status_code == 500
    assert response.json() == {"error": "Database error: disk I/O error"}
