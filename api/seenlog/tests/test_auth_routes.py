from __future__ import annotations

import pytest

from seenlog.core.config import settings
from seenlog.tests.utils import register_and_login


@pytest.mark.asyncio
async def test_register_login_and_me(client):
    auth = await register_and_login(client, prefix="auth")

    me = await client.get("/api/me", headers=auth.headers)

    assert me.status_code == 200
    assert me.json()["email"] == auth.email
    assert "access_token" in client.cookies


@pytest.mark.asyncio
async def test_duplicate_email_is_rejected(client):
    auth = await register_and_login(client, prefix="dup")

    res = await client.post("/api/auth/register", json={"email": auth.email, "password": "anotherpass123"})

    assert res.status_code == 409
    assert res.json()["detail"] == "Email already registered"


@pytest.mark.asyncio
async def test_bad_credentials_are_rejected(client):
    auth = await register_and_login(client, prefix="creds")

    res = await client.post("/api/auth/login", json={"email": auth.email, "password": "wrong-password"})

    assert res.status_code == 401


@pytest.mark.asyncio
async def test_registration_can_be_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "allow_registration", False)

    res = await client.post("/api/auth/register", json={"email": "closed@example.com", "password": "supersecret123"})

    assert res.status_code == 403


@pytest.mark.asyncio
async def test_protected_routes_require_token(client):
    assert (await client.get("/api/me")).status_code == 401
    assert (await client.get("/api/me", headers={"Authorization": "Bearer nonsense"})).status_code == 401
    assert (await client.get("/api/collections")).status_code == 401
