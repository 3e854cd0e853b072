"""Media catalog helpers."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.core.errors import NotFoundError, ValidationFailedError
from seenlog.models.media import MediaItem
from seenlog.schema.media import MediaItemCreate
from seenlog.schema.specifics import empty_specifics

logger = logging.getLogger("seenlog.services.media_service")


async def get_media(session: AsyncSession, media_item_id: uuid.UUID) -> MediaItem:
    """Fetch a media item or fail with ``NotFoundError``."""
    media = await session.get(MediaItem, media_item_id)
    if not media:
        raise NotFoundError("Media item not found")
    return media


async def create_media(session: AsyncSession, payload: MediaItemCreate) -> MediaItem:
    """Create a media item after checking its specifics belong to its lot."""
    specifics = payload.specifics or empty_specifics(payload.lot)
    if specifics.lot != payload.lot.value:
        raise ValidationFailedError(f"Specifics for '{specifics.lot}' do not match lot '{payload.lot.value}'")
    media = MediaItem(
        lot=payload.lot,
        title=payload.title,
        description=payload.description,
        publish_year=payload.publish_year,
        specifics=specifics.model_dump(mode="json"),
    )
    session.add(media)
    await session.commit()
    await session.refresh(media)
    logger.info("Created %s media item %s", media.lot.value, media.id)
    return media
