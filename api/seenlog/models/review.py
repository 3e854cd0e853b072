"""User reviews of media items."""

from __future__ import annotations

import enum
import typing
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seenlog.db.base_class import JSON_COMPATIBLE, Base
from seenlog.utils.datetime import utc_now

if typing.TYPE_CHECKING:  # pragma: no cover
    from seenlog.models.media import MediaItem
    from seenlog.models.user import User


class Visibility(str, enum.Enum):
    """Who may read a review or collection."""
    PUBLIC = "public"
    PRIVATE = "private"


VISIBILITY_ENUM = Enum(Visibility, name="visibility", values_callable=lambda enum_cls: [e.value for e in enum_cls])


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "identifier", name="uq_review_user_identifier"),
        CheckConstraint("rating >= 0 AND rating <= 100", name="ck_review_rating_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    media_item_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("media_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rating: Mapped[int | None]
    text: Mapped[str | None] = mapped_column(String(5000))
    spoiler: Mapped[bool] = mapped_column(default=False, nullable=False)
    visibility: Mapped[Visibility] = mapped_column(VISIBILITY_ENUM, default=Visibility.PRIVATE, nullable=False)
    posted_on: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    identifier: Mapped[str] = mapped_column(String(255), nullable=False)
    extra_information: Mapped[dict | None] = mapped_column(JSON_COMPATIBLE)

    user: Mapped["User"] = relationship(back_populates="reviews")
    media_item: Mapped["MediaItem"] = relationship(back_populates="reviews")
