"""Seen records: a user's reported progress against a media item."""

from __future__ import annotations

import typing
import uuid
from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seenlog.db.base_class import JSON_COMPATIBLE, Base
from seenlog.utils.datetime import utc_now

if typing.TYPE_CHECKING:  # pragma: no cover
    from seenlog.models.media import MediaItem
    from seenlog.models.user import User


class SeenRecord(Base):
    """One consumption attempt; several may exist per user and item."""
    __tablename__ = "seen_records"
    __table_args__ = (
        UniqueConstraint("user_id", "identifier", name="uq_seen_user_identifier"),
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_seen_progress_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    media_item_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("media_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    progress: Mapped[int] = mapped_column(default=0, nullable=False)
    started_on: Mapped[date | None] = mapped_column(Date)
    finished_on: Mapped[date | None] = mapped_column(Date)
    dropped: Mapped[bool] = mapped_column(default=False, nullable=False)
    last_updated_on: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, index=True)
    identifier: Mapped[str] = mapped_column(String(255), nullable=False)
    # {"lot": "show", "season": 1, "episode": 3} or {"lot": "podcast", "episode": 12}
    extra_information: Mapped[dict | None] = mapped_column(JSON_COMPATIBLE)

    user: Mapped["User"] = relationship(back_populates="seen_records")
    media_item: Mapped["MediaItem"] = relationship(back_populates="seen_records")
