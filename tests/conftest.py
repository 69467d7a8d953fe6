"""Pytest configuration and fixtures for the board tests."""
import os

# Set test env BEFORE any imports that use config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CLUB_SECRET_CODE"] = "let-me-in"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SESSION_SECRET"] = "test-secret"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from club.make_admin import set_admin
from club.models.base import Base, async_session_factory, engine
from web.api.main import app

SIGNUP = {
    "firstName": "A",
    "lastName": "B",
    "email": "a@b.com",
    "password": "secret1",
    "confirmPassword": "secret1",
}


@pytest.fixture(autouse=True)
async def _init_db():
    """Fresh tables for every test (ASGI lifespan doesn't run with httpx)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    # In-memory database goes away with the pooled connection
    await engine.dispose()


@pytest.fixture
async def client():
    """Async HTTP client for testing the app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def count_rows(model) -> int:
    async with async_session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model))


async def signup(client, **overrides):
    return await client.post("/signup", data={**SIGNUP, **overrides})


@pytest.fixture
async def user_client(client):
    """Client signed in as a plain user (a@b.com)."""
    r = await signup(client)
    assert r.status_code == 303, r.text
    return client


@pytest.fixture
async def admin_client(client):
    """Client signed in as an admin (boss@b.com)."""
    r = await signup(client, firstName="Boss", email="boss@b.com")
    assert r.status_code == 303, r.text
    assert await set_admin("boss@b.com")
    return client


def _locked() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("database is locked"))


def broken_session_factory():
    """Stand-in for async_session_factory when the database is unreachable."""
    raise _locked()


async def broken_lookup(*args, **kwargs):
    raise _locked()
