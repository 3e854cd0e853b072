"""Summary aggregation: fold a user's completed seen records into typed counters.

Implementation notes:
- Completed records are streamed with a server-side cursor; nothing is
  materialised beyond the distinct-entity sets.
- Show and podcast records only count when their stored locator matches a
  declared season/episode; anything else is skipped without raising.
- Every specifics variant must have a handler; a gap fails at import time.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable

from pydantic import BaseModel, ValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.models.media import MediaItem
from seenlog.models.seen import SeenRecord
from seenlog.models.summary import Summary
from seenlog.models.user import User
from seenlog.schema.specifics import (
    SPECIFICS_TYPES,
    AnimeSpecifics,
    AudioBookSpecifics,
    BookSpecifics,
    MangaSpecifics,
    MovieSpecifics,
    PodcastSeenInformation,
    PodcastSpecifics,
    ShowSeenInformation,
    ShowSpecifics,
    VideoGameSpecifics,
    parse_seen_information,
    parse_specifics,
)
from seenlog.schema.summary import UserSummaryData, UserSummaryRead
from seenlog.services.task_queue import task_queue

logger = logging.getLogger("seenlog.services.summary_service")

STREAM_BATCH_SIZE = 500


@dataclass
class SummaryAccumulator:
    """Running counters plus the sets behind the distinct-entity metrics."""

    data: UserSummaryData = field(default_factory=UserSummaryData)
    shows: set[uuid.UUID] = field(default_factory=set)
    show_seasons: set[tuple[uuid.UUID, int]] = field(default_factory=set)
    podcasts: set[uuid.UUID] = field(default_factory=set)
    podcast_episodes: set[tuple[uuid.UUID, int]] = field(default_factory=set)
    records_seen: int = 0
    records_skipped: int = 0

    def add(self, seen: SeenRecord, media: MediaItem) -> None:
        self.records_seen += 1
        try:
            specifics = parse_specifics(media.specifics or {"lot": media.lot.value})
        except ValidationError:
            logger.warning("Media item %s has unreadable specifics; skipping seen %s", media.id, seen.id)
            self.records_skipped += 1
            return
        SUMMARY_HANDLERS[type(specifics)](self, seen, media, specifics)

    def finish(self) -> UserSummaryData:
        self.data.shows.watched = len(self.shows)
        self.data.shows.watched_seasons = len(self.show_seasons)
        self.data.podcasts.played = len(self.podcasts)
        self.data.podcasts.played_episodes = len(self.podcast_episodes)
        return self.data


def _locator(acc: SummaryAccumulator, seen: SeenRecord, expected: type[BaseModel]):
    try:
        info = parse_seen_information(seen.extra_information)
    except ValidationError:
        logger.debug("Seen %s has a malformed locator", seen.id)
        info = None
    if not isinstance(info, expected):
        acc.records_skipped += 1
        return None
    return info


def _audio_book(acc: SummaryAccumulator, seen: SeenRecord, media: MediaItem, specifics: AudioBookSpecifics) -> None:
    acc.data.audio_books.played += 1
    acc.data.audio_books.runtime += specifics.runtime or 0


def _book(acc: SummaryAccumulator, seen: SeenRecord, media: MediaItem, specifics: BookSpecifics) -> None:
    acc.data.books.read += 1
    acc.data.books.pages += specifics.pages or 0


def _movie(acc: SummaryAccumulator, seen: SeenRecord, media: MediaItem, specifics: MovieSpecifics) -> None:
    acc.data.movies.watched += 1
    acc.data.movies.runtime += specifics.runtime or 0


def _video_game(acc: SummaryAccumulator, seen: SeenRecord, media: MediaItem, specifics: VideoGameSpecifics) -> None:
    acc.data.video_games.played += 1


def _anime(acc: SummaryAccumulator, seen: SeenRecord, media: MediaItem, specifics: AnimeSpecifics) -> None:
    acc.data.anime.watched += 1
    acc.data.anime.episodes += specifics.episodes or 0


def _manga(acc: SummaryAccumulator, seen: SeenRecord, media: MediaItem, specifics: MangaSpecifics) -> None:
    acc.data.manga.read += 1
    acc.data.manga.chapters += specifics.chapters or 0


def _show(acc: SummaryAccumulator, seen: SeenRecord, media: MediaItem, specifics: ShowSpecifics) -> None:
    info: ShowSeenInformation | None = _locator(acc, seen, ShowSeenInformation)
    if info is None:
        return
    for season in specifics.seasons:
        if season.season_number != info.season:
            continue
        for episode in season.episodes:
            if episode.episode_number != info.episode:
                continue
            acc.data.shows.watched_episodes += 1
            acc.data.shows.runtime += episode.runtime or 0
            acc.shows.add(media.id)
            acc.show_seasons.add((media.id, season.season_number))
            return
    acc.records_skipped += 1


def _podcast(acc: SummaryAccumulator, seen: SeenRecord, media: MediaItem, specifics: PodcastSpecifics) -> None:
    info: PodcastSeenInformation | None = _locator(acc, seen, PodcastSeenInformation)
    if info is None:
        return
    for episode in specifics.episodes:
        if episode.number != info.episode:
            continue
        acc.data.podcasts.runtime += episode.runtime or 0
        acc.podcasts.add(media.id)
        acc.podcast_episodes.add((media.id, episode.number))
        return
    acc.records_skipped += 1


SummaryHandler = Callable[[SummaryAccumulator, SeenRecord, MediaItem, BaseModel], None]

SUMMARY_HANDLERS: dict[type[BaseModel], SummaryHandler] = {
    AudioBookSpecifics: _audio_book,
    BookSpecifics: _book,
    MovieSpecifics: _movie,
    ShowSpecifics: _show,
    PodcastSpecifics: _podcast,
    VideoGameSpecifics: _video_game,
    AnimeSpecifics: _anime,
    MangaSpecifics: _manga,
}

_unhandled = [model.__name__ for model in SPECIFICS_TYPES if model not in SUMMARY_HANDLERS]
if _unhandled:
    raise RuntimeError(f"No summary handler for specifics: {', '.join(_unhandled)}")


async def calculate_user_summary(session: AsyncSession, user_id: uuid.UUID) -> Summary:
    """Replace the user's summary with one computed from their completed records."""
    await session.execute(delete(Summary).where(Summary.user_id == user_id))

    accumulator = SummaryAccumulator()
    stream = await session.stream(
        select(SeenRecord, MediaItem)
        .join(MediaItem, MediaItem.id == SeenRecord.media_item_id)
        .where(SeenRecord.user_id == user_id, SeenRecord.progress == 100)
        .execution_options(yield_per=STREAM_BATCH_SIZE)
    )
    try:
        async for seen, media in stream:
            accumulator.add(seen, media)
    finally:
        await stream.close()

    summary = Summary(user_id=user_id, data=accumulator.finish().model_dump(mode="json"))
    session.add(summary)
    await session.commit()
    await session.refresh(summary)
    logger.info(
        "Calculated summary for user %s (%d records, %d skipped)",
        user_id,
        accumulator.records_seen,
        accumulator.records_skipped,
    )
    return summary


async def latest_user_summary(session: AsyncSession, user_id: uuid.UUID) -> UserSummaryRead:
    result = await session.execute(
        select(Summary).where(Summary.user_id == user_id).order_by(Summary.created_at.desc()).limit(1)
    )
    summary = result.scalar_one_or_none()
    if not summary:
        return UserSummaryRead(media=UserSummaryData())
    return UserSummaryRead(media=UserSummaryData.model_validate(summary.data), calculated_on=summary.created_at)


async def regenerate_user_summary(session: AsyncSession, user_id: uuid.UUID) -> str | None:
    """Clear the user's summaries and queue a recompute; returns the job id when queued."""
    await session.execute(delete(Summary).where(Summary.user_id == user_id))
    await session.commit()
    return await task_queue.enqueue_summary_recalculation(
        user_id, fallback=lambda: calculate_user_summary(session, user_id)
    )


async def regenerate_all_user_summaries(session: AsyncSession) -> int:
    result = await session.execute(select(User.id).order_by(User.created_at.asc()))
    user_ids = list(result.scalars().all())
    for user_id in user_ids:
        await calculate_user_summary(session, user_id)
    return len(user_ids)
