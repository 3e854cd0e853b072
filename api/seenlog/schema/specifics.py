"""Lot-specific media attributes and the episode locators stored on seen records.

Both are tagged unions discriminated by ``lot`` and persisted as JSON. The
``lot`` of a specifics payload always equals the owning media item's lot.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from seenlog.models.media import MediaLot


class AudioBookSpecifics(BaseModel):
    lot: Literal["audio_book"] = "audio_book"
    runtime: int | None = Field(default=None, ge=0)


class BookSpecifics(BaseModel):
    lot: Literal["book"] = "book"
    pages: int | None = Field(default=None, ge=0)


class MovieSpecifics(BaseModel):
    lot: Literal["movie"] = "movie"
    runtime: int | None = Field(default=None, ge=0)


class ShowEpisode(BaseModel):
    episode_number: int
    name: str | None = None
    runtime: int | None = Field(default=None, ge=0)


class ShowSeason(BaseModel):
    season_number: int
    name: str | None = None
    episodes: list[ShowEpisode] = Field(default_factory=list)


class ShowSpecifics(BaseModel):
    lot: Literal["show"] = "show"
    seasons: list[ShowSeason] = Field(default_factory=list)


class PodcastEpisode(BaseModel):
    number: int
    title: str | None = None
    runtime: int | None = Field(default=None, ge=0)


class PodcastSpecifics(BaseModel):
    lot: Literal["podcast"] = "podcast"
    episodes: list[PodcastEpisode] = Field(default_factory=list)


class VideoGameSpecifics(BaseModel):
    lot: Literal["video_game"] = "video_game"


class AnimeSpecifics(BaseModel):
    lot: Literal["anime"] = "anime"
    episodes: int | None = Field(default=None, ge=0)


class MangaSpecifics(BaseModel):
    lot: Literal["manga"] = "manga"
    chapters: int | None = Field(default=None, ge=0)


SPECIFICS_TYPES: tuple[type[BaseModel], ...] = (
    AudioBookSpecifics,
    BookSpecifics,
    MovieSpecifics,
    ShowSpecifics,
    PodcastSpecifics,
    VideoGameSpecifics,
    AnimeSpecifics,
    MangaSpecifics,
)

MediaSpecifics = Annotated[
    Union[
        AudioBookSpecifics,
        BookSpecifics,
        MovieSpecifics,
        ShowSpecifics,
        PodcastSpecifics,
        VideoGameSpecifics,
        AnimeSpecifics,
        MangaSpecifics,
    ],
    Field(discriminator="lot"),
]


class ShowSeenInformation(BaseModel):
    lot: Literal["show"] = "show"
    season: int
    episode: int


class PodcastSeenInformation(BaseModel):
    lot: Literal["podcast"] = "podcast"
    episode: int


SeenExtraInformation = Annotated[
    Union[ShowSeenInformation, PodcastSeenInformation],
    Field(discriminator="lot"),
]

_specifics_adapter: TypeAdapter = TypeAdapter(MediaSpecifics)
_seen_information_adapter: TypeAdapter = TypeAdapter(SeenExtraInformation)


def parse_specifics(raw: dict) -> MediaSpecifics:
    """Validate stored specifics JSON into its typed variant."""
    return _specifics_adapter.validate_python(raw)


def parse_seen_information(raw: dict | None) -> SeenExtraInformation | None:
    """Validate a stored seen locator; ``None`` when the record has none."""
    if not raw:
        return None
    return _seen_information_adapter.validate_python(raw)


def empty_specifics(lot: MediaLot) -> MediaSpecifics:
    """Return the specifics variant for ``lot`` with every optional field unset."""
    return parse_specifics({"lot": lot.value})
