"""Collection request/response schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from seenlog.models.review import Visibility
from seenlog.schema.base import ORMModel
from seenlog.schema.media import MediaItemRead


class CollectionUpsert(BaseModel):
    """Create a collection by name, or update the one named by ``update_id``."""
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    visibility: Visibility | None = None
    update_id: UUID | None = None


class CollectionRead(ORMModel):
    id: UUID
    name: str
    description: str | None = None
    visibility: Visibility
    created_at: datetime


class CollectionItemRead(CollectionRead):
    """Collection listing entry with its member count."""
    num_items: int = 0


class CollectionMediaPayload(BaseModel):
    media_item_id: UUID


class CollectionContents(BaseModel):
    """A collection and its media, most recently added first."""
    details: CollectionRead
    media: list[MediaItemRead]
    owner_id: UUID
