"""Review request/response schemas."""

from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field

from seenlog.models.review import Visibility
from seenlog.schema.base import ORMModel


class ReviewCreate(BaseModel):
    """Payload for posting a review; replays with the same identifier are no-ops."""
    identifier: str = Field(min_length=1, max_length=255)
    metadata_id: UUID
    rating: int | None = Field(default=None, ge=0, le=100)
    text: str | None = Field(default=None, max_length=5000)
    spoiler: bool | None = None
    visibility: Visibility | None = None
    date: dt.datetime | None = None
    season_number: int | None = None
    episode_number: int | None = None


class ReviewRead(ORMModel):
    id: UUID
    user_id: UUID
    media_item_id: UUID
    rating: int | None = None
    text: str | None = None
    spoiler: bool
    visibility: Visibility
    posted_on: dt.datetime
    identifier: str
    extra_information: dict | None = None
