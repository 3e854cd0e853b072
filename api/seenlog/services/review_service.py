from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.core.errors import StorageError, UnauthorizedError
from seenlog.models.media import MediaLot
from seenlog.models.review import Review, Visibility
from seenlog.schema.review import ReviewCreate
from seenlog.schema.specifics import ShowSeenInformation
from seenlog.services import media_service
from seenlog.utils.datetime import utc_now

logger = logging.getLogger("seenlog.services.review_service")


async def get_review_by_identifier(session: AsyncSession, user_id: uuid.UUID, identifier: str) -> Review | None:
    result = await session.execute(select(Review).where(Review.user_id == user_id, Review.identifier == identifier))
    return result.scalar_one_or_none()


async def post_review(session: AsyncSession, user_id: uuid.UUID, payload: ReviewCreate) -> Review:
    """Store a review; a replayed identifier returns the stored review unchanged."""
    existing = await get_review_by_identifier(session, user_id, payload.identifier)
    if existing:
        return existing

    media = await media_service.get_media(session, payload.metadata_id)
    extra_information = None
    if media.lot == MediaLot.SHOW and payload.season_number is not None and payload.episode_number is not None:
        extra_information = ShowSeenInformation(
            season=payload.season_number, episode=payload.episode_number
        ).model_dump()

    review = Review(
        user_id=user_id,
        media_item_id=media.id,
        rating=payload.rating,
        text=payload.text,
        spoiler=bool(payload.spoiler),
        visibility=payload.visibility or Visibility.PRIVATE,
        posted_on=payload.date or utc_now(),
        identifier=payload.identifier,
        extra_information=extra_information,
    )
    session.add(review)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raced = await get_review_by_identifier(session, user_id, payload.identifier)
        if raced:
            return raced
        raise StorageError("Unable to store review") from exc
    await session.refresh(review)
    logger.info("Posted review %s on %s for user %s", review.id, media.id, user_id)
    return review


async def delete_review(session: AsyncSession, user_id: uuid.UUID, review_id: uuid.UUID) -> bool:
    review = await session.get(Review, review_id)
    if not review:
        return False
    if review.user_id != user_id:
        raise UnauthorizedError("This review does not belong to you")
    await session.delete(review)
    await session.commit()
    return True
