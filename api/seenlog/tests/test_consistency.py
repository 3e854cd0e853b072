from __future__ import annotations

import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from seenlog.core.errors import NotFoundError, StorageError, ValidationFailedError
from seenlog.models.collection import CollectionMembership, DefaultCollection
from seenlog.models.media import MediaItem, MediaLot
from seenlog.models.review import Review
from seenlog.models.seen import SeenRecord
from seenlog.schema.progress import ProgressUpdateInput
from seenlog.schema.review import ReviewCreate
from seenlog.services import collection_service, consistency_service, progress_service, review_service
from seenlog.tests.utils import make_media, make_user, register_and_login


async def _start(session, user, media, progress=40):
    payload = ProgressUpdateInput(identifier=uuid.uuid4().hex, metadata_id=media.id, progress=progress)
    return (await progress_service.progress_update(session, user.id, payload)).record


async def _review(session, user, media, rating=80):
    payload = ReviewCreate(identifier=uuid.uuid4().hex, metadata_id=media.id, rating=rating, text="Great")
    return await review_service.post_review(session, user.id, payload)


async def _rows(session, model, media_id):
    result = await session.execute(select(model).where(model.media_item_id == media_id))
    return list(result.scalars().all())


async def _in_progress(session, user_id, media_id) -> bool:
    collections = await collection_service.media_in_collections(session, user_id, media_id)
    return DefaultCollection.IN_PROGRESS.value in {collection.name for collection in collections}


@pytest.mark.asyncio
async def test_deleting_unfinished_record_leaves_in_progress(session):
    user = await make_user(session)
    book = await make_media(session, MediaLot.BOOK)
    record = await _start(session, user, book)
    assert await _in_progress(session, user.id, book.id)

    await progress_service.delete_seen_item(session, user.id, record.id)

    assert not await _in_progress(session, user.id, book.id)
    assert await _rows(session, SeenRecord, book.id) == []


@pytest.mark.asyncio
async def test_deleting_record_without_membership_is_not_an_error(session):
    user = await make_user(session)
    book = await make_media(session, MediaLot.BOOK)
    record = await _start(session, user, book)
    await collection_service.remove_media_from_collection(
        session, user.id, DefaultCollection.IN_PROGRESS.value, book.id
    )

    await progress_service.delete_seen_item(session, user.id, record.id)

    assert not await _in_progress(session, user.id, book.id)


@pytest.mark.asyncio
async def test_deleting_completed_record_keeps_other_memberships(session):
    user = await make_user(session)
    book = await make_media(session, MediaLot.BOOK)
    await _start(session, user, book, progress=30)
    finished = await _start(session, user, book, progress=100)
    await collection_service.add_media_to_collection(session, user.id, DefaultCollection.WATCHLIST.value, book.id)

    await progress_service.delete_seen_item(session, user.id, finished.id)

    names = {c.name for c in await collection_service.media_in_collections(session, user.id, book.id)}
    assert DefaultCollection.WATCHLIST.value in names


@pytest.mark.asyncio
async def test_after_progress_event_round_trips_through_job_kwargs(session):
    user = await make_user(session)
    podcast = await make_media(session, MediaLot.PODCAST)
    payload = ProgressUpdateInput(
        identifier="ep-1", metadata_id=podcast.id, progress=10, podcast_episode_number=1
    )
    record = (await progress_service.progress_update(session, user.id, payload)).record

    event = consistency_service.AfterProgressRecorded.from_record(record, podcast.lot)
    kwargs = event.to_job_kwargs()

    assert kwargs["lot"] == "podcast"
    assert consistency_service.AfterProgressRecorded.from_job_kwargs(kwargs) == event


@pytest.mark.asyncio
async def test_merge_moves_seen_and_reviews(session):
    reader = await make_user(session)
    critic = await make_user(session, prefix="critic")
    duplicate = await make_media(session, MediaLot.MOVIE, title="Alien (dup)")
    canonical = await make_media(session, MediaLot.MOVIE, title="Alien", runtime=117)
    duplicate_id, canonical_id, reader_id = duplicate.id, canonical.id, reader.id
    started = await _start(session, reader, duplicate, progress=20)
    await _start(session, critic, duplicate, progress=100)
    review = await _review(session, critic, duplicate)
    started_identifier, review_identifier = started.identifier, review.identifier
    await collection_service.add_media_to_collection(session, reader_id, DefaultCollection.WATCHLIST.value, duplicate_id)

    await consistency_service.merge_metadata(session, duplicate_id, canonical_id)

    assert await _rows(session, SeenRecord, duplicate_id) == []
    assert await _rows(session, Review, duplicate_id) == []
    moved_seen = await _rows(session, SeenRecord, canonical_id)
    moved_reviews = await _rows(session, Review, canonical_id)
    assert len(moved_seen) == 2
    assert len(moved_reviews) == 1
    assert started_identifier in {row.identifier for row in moved_seen}
    assert moved_reviews[0].identifier == review_identifier
    assert moved_reviews[0].rating == 80
    gone = await session.execute(select(MediaItem.id).where(MediaItem.id == duplicate_id))
    assert gone.scalar_one_or_none() is None
    assert await collection_service.media_in_collections(session, reader_id, duplicate_id) == []
    canonical_collections = await collection_service.media_in_collections(session, reader_id, canonical_id)
    assert {c.name for c in canonical_collections} == {
        DefaultCollection.WATCHLIST.value,
        DefaultCollection.IN_PROGRESS.value,
    }


@pytest.mark.asyncio
async def test_merge_keeps_single_membership_when_target_already_collected(session):
    user = await make_user(session)
    duplicate = await make_media(session, MediaLot.BOOK)
    canonical = await make_media(session, MediaLot.BOOK)
    user_id, duplicate_id, canonical_id = user.id, duplicate.id, canonical.id
    for media_id in (duplicate_id, canonical_id):
        await collection_service.add_media_to_collection(session, user_id, DefaultCollection.WATCHLIST.value, media_id)

    await consistency_service.merge_metadata(session, duplicate_id, canonical_id)

    result = await session.execute(
        select(CollectionMembership).where(CollectionMembership.media_item_id == canonical_id)
    )
    assert len(result.scalars().all()) == 1


@pytest.mark.asyncio
async def test_failed_in_progress_sync_leaves_session_usable(session, monkeypatch):
    user = await make_user(session)
    book = await make_media(session, MediaLot.BOOK)
    user_id, book_id = user.id, book.id

    async def _duplicate_membership(session, collection, media_item_id):
        session.add_all(
            [CollectionMembership(collection_id=collection.id, media_item_id=media_item_id) for _ in range(2)]
        )
        await session.flush()
        return True

    monkeypatch.setattr(collection_service, "add_membership", _duplicate_membership)

    payload = ProgressUpdateInput(identifier=uuid.uuid4().hex, metadata_id=book_id, progress=40)
    await progress_service.progress_update(session, user_id, payload)

    assert len(await _rows(session, SeenRecord, book_id)) == 1
    assert not await _in_progress(session, user_id, book_id)


@pytest.mark.asyncio
async def test_merge_rolls_back_on_failure(session, monkeypatch):
    user = await make_user(session)
    source = await make_media(session, MediaLot.BOOK)
    target = await make_media(session, MediaLot.BOOK)
    source_id, target_id = source.id, target.id
    await _start(session, user, source, progress=100)
    await _review(session, user, source)

    original_clone = consistency_service._clone_row

    def _failing_clone(row, **overrides):
        if isinstance(row, Review):
            raise SQLAlchemyError("disk full")
        return original_clone(row, **overrides)

    monkeypatch.setattr(consistency_service, "_clone_row", _failing_clone)

    with pytest.raises(StorageError):
        await consistency_service.merge_metadata(session, source_id, target_id)

    assert len(await _rows(session, SeenRecord, source_id)) == 1
    assert len(await _rows(session, Review, source_id)) == 1
    assert await _rows(session, SeenRecord, target_id) == []
    result = await session.execute(select(MediaItem.id).where(MediaItem.id == source_id))
    assert result.scalar_one_or_none() == source_id


@pytest.mark.asyncio
async def test_merge_validates_ids(session):
    media = await make_media(session, MediaLot.ANIME)

    with pytest.raises(ValidationFailedError):
        await consistency_service.merge_metadata(session, media.id, media.id)
    with pytest.raises(NotFoundError):
        await consistency_service.merge_metadata(session, uuid.uuid4(), media.id)
    with pytest.raises(NotFoundError):
        await consistency_service.merge_metadata(session, media.id, uuid.uuid4())


@pytest.mark.asyncio
async def test_merge_route(client):
    await register_and_login(client, prefix="merger")
    first = (await client.post("/api/media", json={"lot": "manga", "title": "Berserk"})).json()["id"]
    second = (await client.post("/api/media", json={"lot": "manga", "title": "Berserk"})).json()["id"]
    await client.post("/api/me/progress", json={"identifier": "b-1", "metadata_id": first, "progress": 100})

    res = await client.post("/api/media/merge", json={"merge_from": first, "merge_into": second})

    assert res.status_code == 204
    assert (await client.get(f"/api/media/{first}")).status_code == 404
    history = (await client.get(f"/api/me/seen/{second}")).json()
    assert [row["identifier"] for row in history] == ["b-1"]
