"""Progress update payloads and seen record responses."""

from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field

from seenlog.schema.base import ORMModel


class ProgressUpdateInput(BaseModel):
    """A client's progress report; ``progress=None`` drops the active record."""
    identifier: str = Field(min_length=1, max_length=255)
    metadata_id: UUID
    progress: int | None = Field(default=None, ge=0, le=100)
    date: dt.date | None = None
    show_season_number: int | None = None
    show_episode_number: int | None = None
    podcast_episode_number: int | None = None


class SeenRead(ORMModel):
    """Seen record fields for history views."""
    id: UUID
    user_id: UUID
    media_item_id: UUID
    progress: int
    started_on: dt.date | None = None
    finished_on: dt.date | None = None
    dropped: bool
    last_updated_on: dt.datetime
    identifier: str
    extra_information: dict | None = None


class ProgressUpdateResponse(BaseModel):
    """Record affected by a progress report; ``action`` is empty for a replay."""
    seen: SeenRead
    action: str | None = None
    replayed: bool = False
