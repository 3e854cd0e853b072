"""API router composition for all route groups."""

from fastapi import APIRouter

from .routes import auth, collections, media, reviews, users

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, tags=["users"])
api_router.include_router(media.router, tags=["media"])
api_router.include_router(collections.router, prefix="/collections", tags=["collections"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
