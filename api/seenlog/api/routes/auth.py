from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.api.deps import get_db
from seenlog.core.config import settings
from seenlog.core.security import ACCESS_COOKIE_NAME, create_access_token
from seenlog.schema.auth import AccessToken
from seenlog.schema.user import UserCreate, UserLogin, UserRead
from seenlog.services import user_service

router = APIRouter()


def set_auth_cookie(response: Response, access_token: str) -> None:
    response.set_cookie(
        ACCESS_COOKIE_NAME,
        access_token,
        max_age=settings.access_token_expires_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.environment.lower() == "production",
        path="/",
    )


def _token_response(user: UserRead) -> AccessToken:
    return AccessToken(access_token=create_access_token(str(user.id)), user=user)


@router.post("/register", response_model=AccessToken)
async def register(payload: UserCreate, response: Response, session: AsyncSession = Depends(get_db)) -> AccessToken:
    user = await user_service.create_user(session, payload)
    token = _token_response(UserRead.model_validate(user))
    set_auth_cookie(response, token.access_token)
    return token


@router.post("/login", response_model=AccessToken)
async def login(payload: UserLogin, response: Response, session: AsyncSession = Depends(get_db)) -> AccessToken:
    user = await user_service.authenticate_user(session, payload)
    token = _token_response(UserRead.model_validate(user))
    set_auth_cookie(response, token.access_token)
    return token
