import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.api.deps import get_current_user, get_db
from seenlog.models.media import MediaItem
from seenlog.models.user import User
from seenlog.schema.media import MediaItemCreate, MediaItemRead, MediaMergeRequest
from seenlog.services import consistency_service, media_service

router = APIRouter()


@router.post("/media", response_model=MediaItemRead, status_code=status.HTTP_201_CREATED)
async def create_media_item(
    payload: MediaItemCreate,
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> MediaItem:
    return await media_service.create_media(session, payload)


@router.get("/media/{media_item_id}", response_model=MediaItemRead)
async def get_media_item(media_item_id: uuid.UUID, session: AsyncSession = Depends(get_db)) -> MediaItem:
    return await media_service.get_media(session, media_item_id)


@router.post("/media/merge", status_code=status.HTTP_204_NO_CONTENT)
async def merge_media_items(
    payload: MediaMergeRequest,
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    """Fold ``merge_from`` into ``merge_into``; all-or-nothing."""
    await consistency_service.merge_metadata(session, payload.merge_from, payload.merge_into)
