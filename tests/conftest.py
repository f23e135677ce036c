"""Pytest configuration and fixtures for API tests."""
import os

# Set test env BEFORE any imports that use config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SEED_DATA_DIR"] = ""

import pytest
from httpx import ASGITransport, AsyncClient

from tracker.models.base import engine, init_db
from web.api.main import app


@pytest.fixture(autouse=True)
async def _init_db():
    """Fresh in-memory database per test (ASGI lifespan doesn't run with httpx)."""
    await init_db()
    yield
    # Dropping the only pooled connection discards the in-memory database
    await engine.dispose()


@pytest.fixture
async def client():
    """Async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def register(client):
    """Return a coroutine function that registers a user."""

    async def _register(username: str, email: str | None = None, password: str = "testpass123"):
        return await client.post(
            "/api/auth/register",
            json={"username": username, "email": email or f"{username}@example.com", "password": password},
        )

    return _register


@pytest.fixture
async def auth_headers(register):
    """Register a user and return Authorization headers for protected endpoints."""
    r = await register("summoner")
    assert r.status_code == 201, f"Register failed: {r.text}"
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
async def other_headers(register):
    """A second user, for ownership checks."""
    r = await register("rival")
    assert r.status_code == 201, f"Register failed: {r.text}"
    return {"Authorization": f"Bearer {r.json()['token']}"}
