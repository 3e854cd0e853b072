"""User collections, their memberships, and the registry of default collections."""

from __future__ import annotations

import enum
import typing
import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seenlog.db.base_class import Base
from seenlog.models.review import VISIBILITY_ENUM, Visibility
from seenlog.utils.datetime import utc_now

if typing.TYPE_CHECKING:  # pragma: no cover
    from seenlog.models.media import MediaItem
    from seenlog.models.user import User


class DefaultCollection(str, enum.Enum):
    """Collections every account starts with; they can not be deleted."""
    WATCHLIST = "Watchlist"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CUSTOM = "Custom"

    @property
    def description(self) -> str:
        return DEFAULT_COLLECTION_DESCRIPTIONS[self]

    @classmethod
    def is_default_name(cls, name: str) -> bool:
        return any(member.value == name for member in cls)


DEFAULT_COLLECTION_DESCRIPTIONS: dict[DefaultCollection, str] = {
    DefaultCollection.WATCHLIST: "Things I want to watch in the future",
    DefaultCollection.IN_PROGRESS: "Media items that I am currently watching",
    DefaultCollection.COMPLETED: "Media items that I have finished",
    DefaultCollection.CUSTOM: "Items that I have created manually",
}


class Collection(Base):
    __tablename__ = "collections"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_collection_user_name"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(2000))
    visibility: Mapped[Visibility] = mapped_column(VISIBILITY_ENUM, default=Visibility.PRIVATE, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    user: Mapped["User"] = relationship(back_populates="collections")
    memberships: Mapped[list["CollectionMembership"]] = relationship(
        back_populates="collection", cascade="all, delete-orphan"
    )


class CollectionMembership(Base):
    __tablename__ = "collection_memberships"
    __table_args__ = (UniqueConstraint("collection_id", "media_item_id", name="uq_collection_media"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    collection_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("collections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    media_item_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("media_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    added_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    collection: Mapped[Collection] = relationship(back_populates="memberships")
    media_item: Mapped["MediaItem"] = relationship(back_populates="memberships")
