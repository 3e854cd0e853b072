"""Collection CRUD, membership helpers, and default collection seeding."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.core.errors import (
    DefaultCollectionProtectedError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from seenlog.models.collection import Collection, CollectionMembership, DefaultCollection
from seenlog.models.media import MediaItem
from seenlog.models.review import Visibility
from seenlog.schema.collection import CollectionContents, CollectionRead, CollectionUpsert
from seenlog.schema.media import MediaItemRead
from seenlog.services import media_service

logger = logging.getLogger("seenlog.services.collection_service")


async def ensure_default_collections(session: AsyncSession, user_id: uuid.UUID) -> list[Collection]:
    """Create any default collection the user is missing; callers commit."""
    result = await session.execute(select(Collection.name).where(Collection.user_id == user_id))
    existing = set(result.scalars().all())
    created: list[Collection] = []
    for default in DefaultCollection:
        if default.value in existing:
            continue
        collection = Collection(user_id=user_id, name=default.value, description=default.description)
        session.add(collection)
        created.append(collection)
    if created:
        await session.flush()
        logger.info("Seeded %d default collections for user %s", len(created), user_id)
    return created


async def get_collection_by_name(session: AsyncSession, user_id: uuid.UUID, name: str) -> Collection | None:
    result = await session.execute(select(Collection).where(Collection.user_id == user_id, Collection.name == name))
    return result.scalar_one_or_none()


async def list_collections(
    session: AsyncSession, user_id: uuid.UUID, *, name: str | None = None
) -> list[tuple[Collection, int]]:
    """List the user's collections, oldest first, with their member counts."""
    counts = (
        select(CollectionMembership.collection_id, func.count(CollectionMembership.id).label("num_items"))
        .group_by(CollectionMembership.collection_id)
        .subquery()
    )
    query = (
        select(Collection, func.coalesce(counts.c.num_items, 0))
        .outerjoin(counts, counts.c.collection_id == Collection.id)
        .where(Collection.user_id == user_id)
    )
    if name:
        query = query.where(Collection.name == name)
    result = await session.execute(query.order_by(Collection.created_at.asc(), Collection.name.asc()))
    return [(collection, int(num_items)) for collection, num_items in result.all()]


async def create_or_update_collection(
    session: AsyncSession, user_id: uuid.UUID, payload: CollectionUpsert
) -> Collection:
    """Create a collection, return the same-named one, or update by ``update_id``."""
    name = payload.name.strip()
    if not name:
        raise ValidationFailedError("Collection name cannot be blank")

    if payload.update_id is None:
        existing = await get_collection_by_name(session, user_id, name)
        if existing:
            return existing
        collection = Collection(
            user_id=user_id,
            name=name,
            description=payload.description,
            visibility=payload.visibility or Visibility.PRIVATE,
        )
        session.add(collection)
    else:
        collection = await session.get(Collection, payload.update_id)
        if not collection:
            raise NotFoundError("Collection not found")
        if collection.user_id != user_id:
            raise UnauthorizedError("This collection does not belong to you")
        if DefaultCollection.is_default_name(collection.name) and collection.name != name:
            raise DefaultCollectionProtectedError("Can not rename a default collection")
        collection.name = name
        collection.description = payload.description
        if payload.visibility is not None:
            collection.visibility = payload.visibility

    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ValidationFailedError("There was an error creating the collection") from exc
    await session.refresh(collection)
    return collection


async def delete_collection(session: AsyncSession, user_id: uuid.UUID, name: str) -> bool:
    """Delete a user's collection by name; default collections are protected."""
    if DefaultCollection.is_default_name(name):
        raise DefaultCollectionProtectedError()
    collection = await get_collection_by_name(session, user_id, name)
    if not collection:
        return False
    await session.delete(collection)
    await session.commit()
    logger.info("Deleted collection %r for user %s", name, user_id)
    return True


async def add_membership(session: AsyncSession, collection: Collection, media_item_id: uuid.UUID) -> bool:
    """Add an item to a collection unless already present; callers commit."""
    result = await session.execute(
        select(CollectionMembership.id).where(
            CollectionMembership.collection_id == collection.id,
            CollectionMembership.media_item_id == media_item_id,
        )
    )
    if result.scalar_one_or_none():
        return False
    session.add(CollectionMembership(collection_id=collection.id, media_item_id=media_item_id))
    await session.flush()
    return True


async def remove_membership(
    session: AsyncSession, user_id: uuid.UUID, collection_name: str, media_item_id: uuid.UUID
) -> bool:
    """Remove an item from a named collection; a missing membership is not an error."""
    collection = await get_collection_by_name(session, user_id, collection_name)
    if not collection:
        return False
    result = await session.execute(
        delete(CollectionMembership).where(
            CollectionMembership.collection_id == collection.id,
            CollectionMembership.media_item_id == media_item_id,
        )
    )
    return bool(result.rowcount)


async def add_media_to_collection(
    session: AsyncSession, user_id: uuid.UUID, collection_name: str, media_item_id: uuid.UUID
) -> bool:
    collection = await get_collection_by_name(session, user_id, collection_name)
    if not collection:
        raise NotFoundError("Collection not found")
    await media_service.get_media(session, media_item_id)
    added = await add_membership(session, collection, media_item_id)
    await session.commit()
    return added


async def remove_media_from_collection(
    session: AsyncSession, user_id: uuid.UUID, collection_name: str, media_item_id: uuid.UUID
) -> bool:
    removed = await remove_membership(session, user_id, collection_name, media_item_id)
    await session.commit()
    return removed


async def media_in_collections(
    session: AsyncSession, user_id: uuid.UUID, media_item_id: uuid.UUID
) -> list[Collection]:
    """List the user's collections that contain an item."""
    result = await session.execute(
        select(Collection)
        .join(CollectionMembership, CollectionMembership.collection_id == Collection.id)
        .where(Collection.user_id == user_id, CollectionMembership.media_item_id == media_item_id)
        .order_by(Collection.created_at.asc())
    )
    return list(result.scalars().all())


async def collection_contents(
    session: AsyncSession,
    collection_id: uuid.UUID,
    *,
    viewer_id: uuid.UUID | None,
    limit: int | None = None,
) -> CollectionContents:
    """Return a collection with its media; private collections are owner-only."""
    collection = await session.get(Collection, collection_id)
    if not collection:
        raise NotFoundError("Collection not found")
    if collection.visibility != Visibility.PUBLIC:
        if viewer_id is None:
            raise UnauthorizedError("Need to be logged in to view a private collection")
        if viewer_id != collection.user_id:
            raise UnauthorizedError("This collection is not public")

    query = (
        select(MediaItem)
        .join(CollectionMembership, CollectionMembership.media_item_id == MediaItem.id)
        .where(CollectionMembership.collection_id == collection.id)
        .order_by(CollectionMembership.added_at.desc())
    )
    if limit:
        query = query.limit(limit)
    result = await session.execute(query)
    return CollectionContents(
        details=CollectionRead.model_validate(collection),
        media=[MediaItemRead.model_validate(media) for media in result.scalars().all()],
        owner_id=collection.user_id,
    )
