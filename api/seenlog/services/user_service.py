"""Account registration and credential checks."""

from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.core.config import settings
from seenlog.core.errors import StateConflictError, UnauthorizedError
from seenlog.core.security import get_password_hash, verify_password
from seenlog.models.user import User
from seenlog.schema.user import UserCreate, UserLogin
from seenlog.services import collection_service

logger = logging.getLogger("seenlog.services.user_service")


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: str | uuid.UUID | None) -> User | None:
    try:
        user_uuid = uuid.UUID(str(user_id))
    except ValueError:
        return None
    return await session.get(User, user_uuid)


async def create_user(session: AsyncSession, payload: UserCreate) -> User:
    """Register an account and seed its default collections in the same commit."""
    if not settings.allow_registration:
        raise UnauthorizedError("Registration is disabled on this instance")
    if await get_user_by_email(session, payload.email):
        raise StateConflictError("Email already registered")

    user = User(
        email=payload.email.lower(),
        hashed_password=get_password_hash(payload.password),
        display_name=payload.display_name,
    )
    session.add(user)
    try:
        await session.flush()
        await collection_service.ensure_default_collections(session, user.id)
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise StateConflictError("Email already registered") from exc
    await session.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


async def authenticate_user(session: AsyncSession, payload: UserLogin) -> User:
    user = await get_user_by_email(session, payload.email)
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return user
