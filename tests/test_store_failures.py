"""Tests for pages when the database fails mid-request."""
import re

import pytest

from club.models import Message
from conftest import broken_lookup, broken_session_factory, count_rows, signup


def error_text(html: str):
    m = re.search(r'<p class="error"[^>]*>(.*?)</p>', html, re.S)
    return m.group(1) if m else None


@pytest.mark.asyncio
async def test_session_lookup_failure_is_anonymous(user_client, monkeypatch):
    """A store error while resolving the cookie leaves the visitor anonymous."""
    monkeypatch.setattr("web.auth.get_user_by_id", broken_lookup)

    r = await user_client.get("/")
    assert r.status_code == 200
    assert "Welcome" not in r.text
    assert 'href="/login"' in r.text

    r = await user_client.get("/new-message")
    assert r.status_code == 303
    assert r.headers["location"] == "/login"


@pytest.mark.asyncio
async def test_new_message_store_failure(user_client, monkeypatch):
    monkeypatch.setattr("web.api.routes.async_session_factory", broken_session_factory)

    r = await user_client.post("/new-message", data={"title": "Hello", "content": "Body"})
    assert r.status_code == 200
    assert error_text(r.text) == "Could not save message"
    assert 'value="Hello"' in r.text
    assert "database is locked" not in r.text

    monkeypatch.undo()
    assert await count_rows(Message) == 0


@pytest.mark.asyncio
async def test_join_club_store_failure(user_client, monkeypatch):
    monkeypatch.setattr("web.api.auth_routes.async_session_factory", broken_session_factory)

    r = await user_client.post("/join-club", data={"secretCode": "let-me-in"})
    assert r.status_code == 200
    assert error_text(r.text) == "Could not update membership"
    assert "database is locked" not in r.text


@pytest.mark.asyncio
async def test_login_store_failure_uses_generic_message(client, monkeypatch):
    await signup(client)
    client.cookies.clear()
    monkeypatch.setattr("web.auth.get_user_by_email", broken_lookup)

    r = await client.post("/login", data={"email": "a@b.com", "password": "secret1"})
    assert r.status_code == 200
    assert error_text(r.text) == "Invalid email or password"
    assert "session" not in r.cookies
