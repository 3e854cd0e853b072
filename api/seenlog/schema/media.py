"""Media-related schemas for catalog responses and updates."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from seenlog.models.media import MediaLot
from seenlog.schema.base import ORMModel
from seenlog.schema.specifics import MediaSpecifics


class MediaItemCreate(BaseModel):
    """Payload for creating a media item; ``specifics`` must match ``lot``."""
    lot: MediaLot
    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    publish_year: int | None = None
    specifics: MediaSpecifics | None = None


class MediaItemRead(ORMModel):
    """Media item fields returned by the API."""
    id: UUID
    lot: MediaLot
    title: str
    description: str | None = None
    publish_year: int | None = None
    specifics: dict
    created_at: datetime


class MediaMergeRequest(BaseModel):
    """Payload for folding one media item into another."""
    merge_from: UUID
    merge_into: UUID
