"""Shared helpers for API and service tests."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.models.media import MediaItem, MediaLot
from seenlog.models.user import User
from seenlog.schema.media import MediaItemCreate
from seenlog.schema.user import UserCreate
from seenlog.schema.specifics import parse_specifics
from seenlog.services import media_service, user_service


@dataclass(slots=True)
class AuthContext:
    """Authenticated client context for API tests."""

    client: AsyncClient
    user: dict[str, Any]
    email: str
    password: str
    access_token: str

    @property
    def user_id(self) -> str:
        return str(self.user["id"])

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


async def register_and_login(client: AsyncClient, *, prefix: str = "user") -> AuthContext:
    """Register and log in a new user, returning the auth context."""
    suffix = uuid.uuid4().hex[:8]
    email = f"{prefix}_{suffix}@example.com"
    password = "supersecret123"
    creds = {"email": email, "password": password, "display_name": f"{prefix.title()} {suffix}"}

    register_res = await client.post("/api/auth/register", json=creds)
    assert register_res.status_code == 200
    user = register_res.json()["user"]

    login_res = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert login_res.status_code == 200

    return AuthContext(
        client=client,
        user=user,
        email=email,
        password=password,
        access_token=login_res.json()["access_token"],
    )


async def make_user(session: AsyncSession, *, prefix: str = "reader") -> User:
    suffix = uuid.uuid4().hex[:8]
    payload = UserCreate(email=f"{prefix}_{suffix}@example.com", password="supersecret123")
    return await user_service.create_user(session, payload)


async def make_media(session: AsyncSession, lot: MediaLot, title: str | None = None, **specifics: Any) -> MediaItem:
    payload = MediaItemCreate(
        lot=lot,
        title=title or f"{lot.value} {uuid.uuid4().hex[:6]}",
        specifics=parse_specifics({"lot": lot.value, **specifics}),
    )
    return await media_service.create_media(session, payload)
