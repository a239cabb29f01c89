"""
tests/test_rate_limits.py -- Per-IP limits on the public auth routes.

conftest.py disables the shared limiter for the rest of the suite; the
limiter_on fixture switches it back on for one test and clears its counters
on both sides so no state leaks between tests.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from core.config import get_settings


@pytest.fixture
def limiter_on():
    limiter.reset()
    limiter.enabled = True
    yield limiter
    limiter.enabled = False
    limiter.reset()


def _allowed(limit: str) -> int:
    """Request count allowed by a limit string such as "10/minute"."""
    return int(limit.split("/")[0])


class TestLoginLimit:
    def test_login_throttled_after_limit(self, client: TestClient, make_user, limiter_on) -> None:
        make_user("limited@example.com")
        allowed = _allowed(get_settings().login_rate_limit)
        statuses = [
            client.post("/api/auth/login", json={"email": "limited@example.com", "password": "wrong-pass"}).status_code
            for _ in range(allowed + 3)
        ]
        assert statuses[:allowed] == [401] * allowed
        assert statuses[allowed:] == [429] * 3

    def test_throttled_response_uses_error_envelope(self, client: TestClient, limiter_on) -> None:
        allowed = _allowed(get_settings().login_rate_limit)
        for _ in range(allowed):
            client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "wrong-pass"})
        resp = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "wrong-pass"})
        assert resp.status_code == 429
        assert resp.json()["error"]["code"] == "rate_limited"
        assert "retry-after" in resp.headers


class TestRegisterLimit:
    def test_register_throttled_after_limit(self, client: TestClient, limiter_on) -> None:
        allowed = _allowed(get_settings().register_rate_limit)
        statuses = [
            client.post(
                "/api/auth/register",
                json={"email": f"user{i}@example.com", "password": "secret123", "fullName": f"User {i}"},
            ).status_code
            for i in range(allowed + 2)
        ]
        assert statuses[:allowed] == [201] * allowed
        assert statuses[allowed:] == [429] * 2


def test_limits_off_when_disabled(client: TestClient) -> None:
    """With the limiter disabled (the suite default) repeated logins are never throttled."""
    allowed = _allowed(get_settings().login_rate_limit)
    statuses = {
        client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "wrong-pass"}).status_code
        for _ in range(allowed + 3)
    }
    assert statuses == {401}
