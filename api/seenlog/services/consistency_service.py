"""Side effects that keep collections and references consistent.

Invariants:
- An item is in the user's "In Progress" collection while their latest report
  on it is neither complete nor dropped.
- A metadata merge is all-or-nothing: either every seen and review row moved
  and the source item is gone, or nothing changed. Collection memberships
  follow the merged item.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.core.errors import StorageError, ValidationFailedError
from seenlog.db.base_class import Base
from seenlog.models.collection import CollectionMembership, DefaultCollection
from seenlog.models.media import MediaItem, MediaLot
from seenlog.models.review import Review
from seenlog.models.seen import SeenRecord
from seenlog.services import collection_service, media_service

logger = logging.getLogger("seenlog.services.consistency_service")


@dataclass(slots=True, frozen=True)
class AfterProgressRecorded:
    """Signal emitted after a seen record is created or updated."""

    seen_id: uuid.UUID
    user_id: uuid.UUID
    media_item_id: uuid.UUID
    progress: int
    dropped: bool
    lot: MediaLot

    @classmethod
    def from_record(cls, record: SeenRecord, lot: MediaLot) -> "AfterProgressRecorded":
        return cls(
            seen_id=record.id,
            user_id=record.user_id,
            media_item_id=record.media_item_id,
            progress=record.progress,
            dropped=record.dropped,
            lot=lot,
        )

    @classmethod
    def from_job_kwargs(cls, kwargs: dict[str, Any]) -> "AfterProgressRecorded":
        return cls(
            seen_id=uuid.UUID(kwargs["seen_id"]),
            user_id=uuid.UUID(kwargs["user_id"]),
            media_item_id=uuid.UUID(kwargs["media_item_id"]),
            progress=int(kwargs["progress"]),
            dropped=bool(kwargs["dropped"]),
            lot=MediaLot(kwargs["lot"]),
        )

    def to_job_kwargs(self) -> dict[str, Any]:
        """Flatten into picklable primitives for the worker queue."""
        return {
            "seen_id": str(self.seen_id),
            "user_id": str(self.user_id),
            "media_item_id": str(self.media_item_id),
            "progress": self.progress,
            "dropped": self.dropped,
            "lot": self.lot.value,
        }


async def after_progress_recorded(session: AsyncSession, event: AfterProgressRecorded) -> None:
    """Add unfinished items to "In Progress" and take finished or dropped ones out."""
    try:
        if event.progress < 100 and not event.dropped:
            collection = await collection_service.get_collection_by_name(
                session, event.user_id, DefaultCollection.IN_PROGRESS.value
            )
            if collection is None:
                await collection_service.ensure_default_collections(session, event.user_id)
                collection = await collection_service.get_collection_by_name(
                    session, event.user_id, DefaultCollection.IN_PROGRESS.value
                )
            await collection_service.add_membership(session, collection, event.media_item_id)
        else:
            await collection_service.remove_membership(
                session, event.user_id, DefaultCollection.IN_PROGRESS.value, event.media_item_id
            )
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        raise


async def on_seen_deleted(
    session: AsyncSession, *, user_id: uuid.UUID, media_item_id: uuid.UUID, progress: int
) -> None:
    """Drop an unfinished item from "In Progress" once its seen record is deleted; callers commit."""
    if progress >= 100:
        return
    removed = await collection_service.remove_membership(
        session, user_id, DefaultCollection.IN_PROGRESS.value, media_item_id
    )
    if removed:
        logger.debug("Removed %s from In Progress for user %s", media_item_id, user_id)


def _clone_row(row: Base, **overrides: Any) -> Base:
    """Copy every column except the primary key into a new instance."""
    mapper = inspect(type(row))
    values = {attr.key: getattr(row, attr.key) for attr in mapper.column_attrs if attr.key != "id"}
    values.update(overrides)
    return type(row)(**values)


async def _move_rows(session: AsyncSession, rows: list[Base], media_item_id: uuid.UUID) -> None:
    for row in rows:
        clone = _clone_row(row, media_item_id=media_item_id)
        await session.delete(row)
        # Frees the per-user identifier before the copy is inserted.
        await session.flush()
        session.add(clone)
    await session.flush()


async def _move_memberships(session: AsyncSession, merge_from: uuid.UUID, merge_into: uuid.UUID) -> int:
    """Point source memberships at the target; collections already holding the target keep their row."""
    held = await session.execute(
        select(CollectionMembership.collection_id).where(CollectionMembership.media_item_id == merge_into)
    )
    held_collections = set(held.scalars().all())
    rows = await session.execute(
        select(CollectionMembership).where(CollectionMembership.media_item_id == merge_from)
    )
    moved = 0
    for membership in rows.scalars().all():
        if membership.collection_id in held_collections:
            await session.delete(membership)
            continue
        membership.media_item_id = merge_into
        held_collections.add(membership.collection_id)
        moved += 1
    await session.flush()
    return moved


async def merge_metadata(session: AsyncSession, merge_from: uuid.UUID, merge_into: uuid.UUID) -> None:
    """Re-point every seen, review and membership row from ``merge_from`` to ``merge_into`` and delete the source."""
    if merge_from == merge_into:
        raise ValidationFailedError("Can not merge a media item into itself")
    await media_service.get_media(session, merge_from)
    await media_service.get_media(session, merge_into)

    try:
        seen_rows = await session.execute(select(SeenRecord).where(SeenRecord.media_item_id == merge_from))
        moved_seen = list(seen_rows.scalars().all())
        await _move_rows(session, moved_seen, merge_into)

        review_rows = await session.execute(select(Review).where(Review.media_item_id == merge_from))
        moved_reviews = list(review_rows.scalars().all())
        await _move_rows(session, moved_reviews, merge_into)

        moved_memberships = await _move_memberships(session, merge_from, merge_into)
        await session.execute(delete(MediaItem).where(MediaItem.id == merge_from))
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Merge of %s into %s failed; rolled back", merge_from, merge_into)
        raise StorageError("Metadata merge failed; no changes were applied") from exc

    logger.info(
        "Merged %s into %s (%d seen, %d reviews, %d memberships)",
        merge_from,
        merge_into,
        len(moved_seen),
        len(moved_reviews),
        moved_memberships,
    )
