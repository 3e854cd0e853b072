"""Media catalog model shared across users."""

from __future__ import annotations

import enum
import typing
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seenlog.db.base_class import JSON_COMPATIBLE, Base
from seenlog.utils.datetime import utc_now

if typing.TYPE_CHECKING:  # pragma: no cover
    from seenlog.models.collection import CollectionMembership
    from seenlog.models.review import Review
    from seenlog.models.seen import SeenRecord


class MediaLot(str, enum.Enum):
    """Kinds of media a user can track."""
    AUDIO_BOOK = "audio_book"
    BOOK = "book"
    MOVIE = "movie"
    SHOW = "show"
    PODCAST = "podcast"
    VIDEO_GAME = "video_game"
    ANIME = "anime"
    MANGA = "manga"


class MediaItem(Base):
    """Canonical media record with lot-specific attributes stored as JSON."""
    __tablename__ = "media_items"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Persist the enum values (lowercase) instead of names (uppercase) so they match the DB enum
    lot: Mapped[MediaLot] = mapped_column(
        Enum(MediaLot, name="media_lot", values_callable=lambda enum_cls: [e.value for e in enum_cls]),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    description: Mapped[str | None]
    publish_year: Mapped[int | None]
    specifics: Mapped[dict] = mapped_column(JSON_COMPATIBLE, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    seen_records: Mapped[list["SeenRecord"]] = relationship(back_populates="media_item")
    reviews: Mapped[list["Review"]] = relationship(back_populates="media_item")
    memberships: Mapped[list["CollectionMembership"]] = relationship(back_populates="media_item")
