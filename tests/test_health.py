"""Tests for GET /api/health and the shared error envelope."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from api.main import VERSION


def test_health_ok(client: TestClient) -> None:
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION
    assert data["components"] == {"app": "ok", "database": "ok"}


def test_health_degraded_when_database_fails(client: TestClient, stores) -> None:
    with patch.object(stores.users, "ping", side_effect=RuntimeError("db down")):
        resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "degraded"
    assert resp.json()["components"]["database"] == "error"


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "http_404"
