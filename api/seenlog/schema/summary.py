"""Typed counters stored in a user's summary snapshot."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class BooksSummary(BaseModel):
    read: int = 0
    pages: int = 0


class MoviesSummary(BaseModel):
    watched: int = 0
    runtime: int = 0


class ShowsSummary(BaseModel):
    watched: int = 0
    watched_episodes: int = 0
    watched_seasons: int = 0
    runtime: int = 0


class VideoGamesSummary(BaseModel):
    played: int = 0


class AudioBooksSummary(BaseModel):
    played: int = 0
    runtime: int = 0


class PodcastsSummary(BaseModel):
    played: int = 0
    played_episodes: int = 0
    runtime: int = 0


class AnimeSummary(BaseModel):
    watched: int = 0
    episodes: int = 0


class MangaSummary(BaseModel):
    read: int = 0
    chapters: int = 0


class UserSummaryData(BaseModel):
    """All per-lot counters; missing optional attributes count as zero."""
    books: BooksSummary = Field(default_factory=BooksSummary)
    movies: MoviesSummary = Field(default_factory=MoviesSummary)
    shows: ShowsSummary = Field(default_factory=ShowsSummary)
    video_games: VideoGamesSummary = Field(default_factory=VideoGamesSummary)
    audio_books: AudioBooksSummary = Field(default_factory=AudioBooksSummary)
    podcasts: PodcastsSummary = Field(default_factory=PodcastsSummary)
    anime: AnimeSummary = Field(default_factory=AnimeSummary)
    manga: MangaSummary = Field(default_factory=MangaSummary)


class UserSummaryRead(BaseModel):
    """Latest summary for a user; ``calculated_on`` is empty before the first run."""
    media: UserSummaryData
    calculated_on: datetime | None = None


class SummaryRegenerateResponse(BaseModel):
    """Opaque reference to the queued recompute job."""
    job_id: str | None = None
