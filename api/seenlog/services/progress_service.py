"""Progress updates: turn a client's partial report into a seen record mutation.

Invariants:
- A replayed ``identifier`` returns the stored record and mutates nothing.
- The "active" record is the most recently updated one for (user, item) that is
  neither complete nor dropped; older unfinished records are left untouched.
- ``finished_on`` is only ever set together with ``progress == 100``.
"""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.core.errors import (
    NotFoundError,
    StateConflictError,
    StorageError,
    UnauthorizedError,
    ValidationFailedError,
)
from seenlog.models.media import MediaItem, MediaLot
from seenlog.models.seen import SeenRecord
from seenlog.schema.progress import ProgressUpdateInput
from seenlog.schema.specifics import PodcastSeenInformation, ShowSeenInformation
from seenlog.services import consistency_service, media_service
from seenlog.services.task_queue import task_queue
from seenlog.utils.datetime import utc_now, utc_today

logger = logging.getLogger("seenlog.services.progress_service")


class ProgressUpdateAction(str, enum.Enum):
    """What a progress report means for the user's history."""
    UPDATE = "update"
    NOW = "now"
    IN_THE_PAST = "in_the_past"
    JUST_STARTED = "just_started"
    DROP = "drop"


@dataclass(slots=True)
class ProgressUpdateResult:
    """Affected record plus the action taken; ``action`` is None for a replay."""

    record: SeenRecord
    action: ProgressUpdateAction | None

    @property
    def replayed(self) -> bool:
        return self.action is None


def classify_progress_update(
    progress: int | None,
    finished_date: date | None,
    *,
    has_active: bool,
    today: date,
) -> ProgressUpdateAction:
    """Decide which mutation a report implies."""
    if progress is None:
        return ProgressUpdateAction.DROP
    if progress == 100:
        if finished_date is None or finished_date != today:
            return ProgressUpdateAction.IN_THE_PAST
        return ProgressUpdateAction.UPDATE if has_active else ProgressUpdateAction.NOW
    return ProgressUpdateAction.UPDATE if has_active else ProgressUpdateAction.JUST_STARTED


async def get_record_by_identifier(session: AsyncSession, user_id: uuid.UUID, identifier: str) -> SeenRecord | None:
    result = await session.execute(
        select(SeenRecord).where(SeenRecord.user_id == user_id, SeenRecord.identifier == identifier)
    )
    return result.scalar_one_or_none()


async def get_active_record(session: AsyncSession, user_id: uuid.UUID, media_item_id: uuid.UUID) -> SeenRecord | None:
    """Return the most recently updated unfinished, undropped record."""
    result = await session.execute(
        select(SeenRecord)
        .where(
            SeenRecord.user_id == user_id,
            SeenRecord.media_item_id == media_item_id,
            SeenRecord.progress < 100,
            SeenRecord.dropped.is_(False),
        )
        .order_by(SeenRecord.last_updated_on.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


def _seen_information(media: MediaItem, payload: ProgressUpdateInput) -> dict | None:
    """Build the episode locator that shows and podcasts must carry."""
    if media.lot == MediaLot.SHOW:
        if payload.show_season_number is None or payload.show_episode_number is None:
            raise ValidationFailedError("Show progress requires a season and an episode number")
        return ShowSeenInformation(
            season=payload.show_season_number, episode=payload.show_episode_number
        ).model_dump()
    if media.lot == MediaLot.PODCAST:
        if payload.podcast_episode_number is None:
            raise ValidationFailedError("Podcast progress requires an episode number")
        return PodcastSeenInformation(episode=payload.podcast_episode_number).model_dump()
    return None


def _new_record(
    user_id: uuid.UUID,
    media: MediaItem,
    payload: ProgressUpdateInput,
    action: ProgressUpdateAction,
    today: date,
) -> SeenRecord:
    extra_information = _seen_information(media, payload)
    if action == ProgressUpdateAction.JUST_STARTED:
        progress, started_on, finished_on = payload.progress, today, None
    else:
        progress, started_on, finished_on = 100, None, payload.date or today
    return SeenRecord(
        user_id=user_id,
        media_item_id=media.id,
        progress=progress,
        started_on=started_on,
        finished_on=finished_on,
        dropped=False,
        last_updated_on=utc_now(),
        identifier=payload.identifier,
        extra_information=extra_information,
    )


async def progress_update(
    session: AsyncSession,
    user_id: uuid.UUID,
    payload: ProgressUpdateInput,
    *,
    today: date | None = None,
) -> ProgressUpdateResult:
    """Apply a progress report and queue the after-progress side effects."""
    if payload.progress is not None and not 0 <= payload.progress <= 100:
        raise ValidationFailedError("Progress must be between 0 and 100")

    existing = await get_record_by_identifier(session, user_id, payload.identifier)
    if existing:
        logger.debug("Replayed progress identifier %s for user %s", payload.identifier, user_id)
        return ProgressUpdateResult(record=existing, action=None)

    media = await media_service.get_media(session, payload.metadata_id)
    today = today or utc_today()
    active = await get_active_record(session, user_id, media.id)
    action = classify_progress_update(payload.progress, payload.date, has_active=active is not None, today=today)

    if action == ProgressUpdateAction.UPDATE:
        active.progress = payload.progress
        active.last_updated_on = utc_now()
        if payload.progress == 100:
            active.finished_on = today
        record = active
    elif action == ProgressUpdateAction.DROP:
        if active is None:
            raise StateConflictError("There is no seen item underway")
        active.dropped = True
        active.last_updated_on = utc_now()
        record = active
    else:
        record = _new_record(user_id, media, payload, action, today)
        session.add(record)

    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        # A concurrent submission with the same identifier won the insert.
        raced = await get_record_by_identifier(session, user_id, payload.identifier)
        if raced:
            return ProgressUpdateResult(record=raced, action=None)
        raise StorageError("Unable to record progress") from exc
    await session.refresh(record)
    logger.info("Progress %s on %s for user %s (seen %s)", action.value, media.id, user_id, record.id)

    event = consistency_service.AfterProgressRecorded.from_record(record, media.lot)
    await task_queue.enqueue_after_progress(
        event.to_job_kwargs(),
        fallback=lambda: consistency_service.after_progress_recorded(session, event),
    )
    return ProgressUpdateResult(record=record, action=action)


async def seen_history(session: AsyncSession, user_id: uuid.UUID, media_item_id: uuid.UUID) -> list[SeenRecord]:
    """List every seen record the user has for an item, newest first."""
    result = await session.execute(
        select(SeenRecord)
        .where(SeenRecord.user_id == user_id, SeenRecord.media_item_id == media_item_id)
        .order_by(SeenRecord.last_updated_on.desc())
    )
    return list(result.scalars().all())


async def delete_seen_item(session: AsyncSession, user_id: uuid.UUID, seen_id: uuid.UUID) -> uuid.UUID:
    """Delete one of the user's seen records and reconcile collection membership."""
    record = await session.get(SeenRecord, seen_id)
    if not record:
        raise NotFoundError("This seen item does not exist")
    if record.user_id != user_id:
        raise UnauthorizedError("This seen item does not belong to this user")
    progress, media_item_id = record.progress, record.media_item_id
    await session.delete(record)
    await consistency_service.on_seen_deleted(
        session, user_id=user_id, media_item_id=media_item_id, progress=progress
    )
    await session.commit()
    logger.info("Deleted seen %s for user %s", seen_id, user_id)
    return seen_id
