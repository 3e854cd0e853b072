"""Collection endpoints; default collections can not be deleted."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.api.deps import get_current_user, get_db, get_optional_current_user
from seenlog.models.collection import Collection
from seenlog.models.user import User
from seenlog.schema.collection import (
    CollectionContents,
    CollectionItemRead,
    CollectionMediaPayload,
    CollectionRead,
    CollectionUpsert,
)
from seenlog.services import collection_service

router = APIRouter()


@router.get("", response_model=list[CollectionItemRead])
async def list_collections(
    name: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[CollectionItemRead]:
    rows = await collection_service.list_collections(session, current_user.id, name=name)
    return [
        CollectionItemRead(**CollectionRead.model_validate(collection).model_dump(), num_items=num_items)
        for collection, num_items in rows
    ]


@router.post("", response_model=CollectionRead)
async def create_or_update_collection(
    payload: CollectionUpsert,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> Collection:
    return await collection_service.create_or_update_collection(session, current_user.id, payload)


@router.get("/media/{media_item_id}", response_model=list[CollectionRead])
async def collections_containing_media(
    media_item_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    return await collection_service.media_in_collections(session, current_user.id, media_item_id)


@router.get("/{collection_id}/contents", response_model=CollectionContents)
async def collection_contents(
    collection_id: uuid.UUID,
    limit: int | None = Query(default=None, ge=1, le=500),
    current_user: User | None = Depends(get_optional_current_user),
    session: AsyncSession = Depends(get_db),
) -> CollectionContents:
    return await collection_service.collection_contents(
        session, collection_id, viewer_id=current_user.id if current_user else None, limit=limit
    )


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_collection(
    name: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    deleted = await collection_service.delete_collection(session, current_user.id, name)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Collection not found")


@router.post("/{name}/items", status_code=status.HTTP_204_NO_CONTENT)
async def add_to_collection(
    name: str,
    payload: CollectionMediaPayload,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    await collection_service.add_media_to_collection(session, current_user.id, name, payload.media_item_id)


@router.delete("/{name}/items/{media_item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_collection(
    name: str,
    media_item_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    await collection_service.remove_media_from_collection(session, current_user.id, name, media_item_id)
