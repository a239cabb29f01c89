"""
tests/conftest.py -- Shared test fixtures for TaskDash unit and integration tests.

This module provides:
  - memory_url():    a unique named shared-memory SQLite URL
  - stores:          UserStore + TeamStore + PlannerStore on one fresh database
  - file_stores:     the same three stores on a file-backed database under tmp_path
  - client:          TestClient wired to those stores through a patched lifespan
  - make_user:       registers a user through the API, returns (headers, user json)

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool and because the
three stores each own an engine. Plain :memory: DBs are per-connection and
would present a blank schema to each worker thread and each store. The named
URI format (file:name?mode=memory&cache=shared&uri=true) shares one in-memory
instance across all connections in the same process.

Every test gets its own database (uuid in the name), so "first registered
user becomes admin" can be asserted without ordering games.

Environment must be set before any project import: get_settings() refuses to
start without SECRET_KEY, bcrypt at cost 4 keeps the suite fast, and the rate
limiter would otherwise throttle the many registrations the tests perform.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager

os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import UserStore
from planner.store import PlannerStore
from team.store import TeamStore

DEFAULT_PASSWORD = "secret123"


def memory_url(prefix: str = "taskdash") -> str:
    return f"sqlite:///file:{prefix}_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


class Stores:
    """The three stores of one test database."""

    def __init__(self, db_url: str) -> None:
        self.users = UserStore(db_url)
        self.team = TeamStore(db_url)
        self.planner = PlannerStore(db_url)

    def close(self) -> None:
        self.planner.close()
        self.team.close()
        self.users.close()


def _patch_lifespan(stores: Stores):
    """Return an async context manager that replaces the real lifespan.

    Wires the test stores into app.state so TestClient routes see the isolated
    test database rather than DATABASE_URL.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = stores.users
        app.state.team_store = stores.team
        app.state.planner = stores.planner
        yield

    return test_lifespan


@pytest.fixture
def stores() -> Generator[Stores, None, None]:
    s = Stores(memory_url())
    yield s
    s.close()


@pytest.fixture
def file_stores(tmp_path) -> Generator[Stores, None, None]:
    """Stores on a file-backed database, for tests that need real per-thread connections."""
    s = Stores(f"sqlite:///{tmp_path / 'taskdash.db'}")
    yield s
    s.close()


@pytest.fixture
def client(stores: Stores) -> Generator[TestClient, None, None]:
    """TestClient on the real app with a fresh database per test."""
    app.router.lifespan_context = _patch_lifespan(stores)
    with TestClient(app, raise_server_exceptions=True) as test_client:
        yield test_client


@pytest.fixture
def make_user(client: TestClient) -> Callable[..., tuple[dict, dict]]:
    """Register a user through POST /api/auth/register.

    Returns a function (email, full_name=..., password=...) -> (auth_headers, user_json).
    """

    def _make_user(email: str, full_name: str | None = None, password: str = DEFAULT_PASSWORD) -> tuple[dict, dict]:
        resp = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "fullName": full_name or email.split("@")[0].title()},
        )
        assert resp.status_code == 201, f"Registration failed: {resp.status_code} {resp.text}"
        data = resp.json()
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _make_user
