"""
tests/conftest.py -- Shared test fixtures for alert service tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + alerts
  - _patch_lifespan(): wires test stores and a fresh session registry into
    app.state, bypassing real startup
  - api_client: TestClient for API integration tests
  - register_and_login(): helper returning a bearer token for a new account

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

BCRYPT_ROUNDS must be set before any auth module import: auth/tokens.py reads
settings and computes its timing dummy hash at import time.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# Set before any project import so get_settings() sees them.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from alerts.store import AlertStore
from api.main import app
from auth.sessions import InMemorySessionRegistry
from auth.store import UserStore

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, AlertStore]:
    """Create isolated named shared-memory SQLite stores for test isolation.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    users_url = f"sqlite:///file:test_users_{db_suffix}?mode=memory&cache=shared&uri=true"
    alerts_url = f"sqlite:///file:test_alerts_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url=users_url), AlertStore(db_url=alerts_url)


def _patch_lifespan(user_store: UserStore, alert_store: AlertStore, sessions: InMemorySessionRegistry):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.alert_store = alert_store
        app.state.sessions = sessions
        yield

    return test_lifespan


def unique_email() -> str:
    return f"user-{uuid.uuid4().hex[:12]}@example.com"


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register_and_login(client: TestClient, email: str | None = None, password: str = "pw1") -> str:
    """Register a fresh account, log in, and return the session token."""
    email = email or unique_email()
    resp = client.post("/api/register", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    resp = client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, InMemorySessionRegistry], None, None]:
    """Yield (client, session_registry) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so tests
    hit real route handlers but use isolated in-memory stores. The registry
    is returned so tests can inspect or seed sessions directly.
    """
    suffix = request.module.__name__.rsplit(".", 1)[-1]
    user_store, alert_store = _make_test_stores(suffix)
    sessions = InMemorySessionRegistry()

    app.router.lifespan_context = _patch_lifespan(user_store, alert_store, sessions)

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client, sessions

    alert_store.close()
    user_store.close()


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def alert_store() -> Generator[AlertStore, None, None]:
    store = AlertStore("sqlite:///:memory:")
    yield store
    store.close()
