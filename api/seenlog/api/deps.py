"""Request-scoped dependencies: the database session and the calling user."""

from typing import AsyncIterator

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.core.config import settings
from seenlog.core.security import ACCESS_COOKIE_NAME, ACCESS_TOKEN_TYPE, decode_token
from seenlog.db.session import get_session
from seenlog.models.user import User
from seenlog.services import user_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login", auto_error=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


def get_request_token(
    bearer: str | None = Depends(oauth2_scheme),
    cookie: str | None = Cookie(default=None, alias=ACCESS_COOKIE_NAME),
) -> str | None:
    """Prefer the Authorization header and fall back to the login cookie."""
    return bearer or cookie


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail=detail, headers={"WWW-Authenticate": "Bearer"}
    )


async def _user_for_token(session: AsyncSession, token: str) -> User:
    claims = decode_token(token)
    if not claims or claims.get("type") != ACCESS_TOKEN_TYPE:
        raise _unauthenticated("Invalid token")
    user = await user_service.get_user_by_id(session, claims.get("sub"))
    if not user:
        raise _unauthenticated("User not found")
    return user


async def get_current_user(
    session: AsyncSession = Depends(get_db),
    token: str | None = Depends(get_request_token),
) -> User:
    if not token:
        raise _unauthenticated("Not authenticated")
    return await _user_for_token(session, token)


async def get_optional_current_user(
    session: AsyncSession = Depends(get_db),
    token: str | None = Depends(get_request_token),
) -> User | None:
    """Resolve the caller when a token is present; a bad token still fails."""
    if not token:
        return None
    return await _user_for_token(session, token)
