from __future__ import annotations

import pytest

from seenlog.core.errors import DefaultCollectionProtectedError
from seenlog.models.collection import DefaultCollection
from seenlog.services import collection_service
from seenlog.tests.utils import make_user, register_and_login


@pytest.mark.asyncio
async def test_registration_seeds_default_collections(session):
    user = await make_user(session)

    rows = await collection_service.list_collections(session, user.id)

    assert {collection.name for collection, _ in rows} == {default.value for default in DefaultCollection}
    descriptions = {collection.name: collection.description for collection, _ in rows}
    assert descriptions[DefaultCollection.WATCHLIST.value] == DefaultCollection.WATCHLIST.description


@pytest.mark.asyncio
async def test_seeding_is_idempotent(session):
    user = await make_user(session)

    created = await collection_service.ensure_default_collections(session, user.id)
    await session.commit()

    assert created == []
    assert len(await collection_service.list_collections(session, user.id)) == len(DefaultCollection)


@pytest.mark.asyncio
@pytest.mark.parametrize("default", list(DefaultCollection))
async def test_default_collections_can_not_be_deleted(session, default):
    user = await make_user(session)

    with pytest.raises(DefaultCollectionProtectedError):
        await collection_service.delete_collection(session, user.id, default.value)


@pytest.mark.asyncio
async def test_collection_routes(client):
    auth = await register_and_login(client, prefix="collector")
    media_res = await client.post("/api/media", json={"lot": "video_game", "title": "Outer Wilds"})
    media_id = media_res.json()["id"]

    create_res = await client.post("/api/collections", json={"name": "Favourites", "visibility": "public"})
    assert create_res.status_code == 200
    collection = create_res.json()
    again = await client.post("/api/collections", json={"name": "Favourites"})
    assert again.json()["id"] == collection["id"]

    add_res = await client.post("/api/collections/Favourites/items", json={"media_item_id": media_id})
    assert add_res.status_code == 204
    listing = await client.get("/api/collections", params={"name": "Favourites"})
    assert listing.json()[0]["num_items"] == 1

    containing = await client.get(f"/api/collections/media/{media_id}")
    assert [row["name"] for row in containing.json()] == ["Favourites"]

    contents = await client.get(f"/api/collections/{collection['id']}/contents")
    assert contents.status_code == 200
    assert contents.json()["owner_id"] == auth.user_id
    assert [item["id"] for item in contents.json()["media"]] == [media_id]

    remove_res = await client.delete(f"/api/collections/Favourites/items/{media_id}")
    assert remove_res.status_code == 204
    assert (await client.delete(f"/api/collections/Favourites/items/{media_id}")).status_code == 204

    protected = await client.delete("/api/collections/Watchlist")
    assert protected.status_code == 400
    assert protected.json()["detail"] == "Can not delete a default collection"

    assert (await client.delete("/api/collections/Favourites")).status_code == 204
    assert (await client.delete("/api/collections/Favourites")).status_code == 404


@pytest.mark.asyncio
async def test_default_collection_can_not_be_renamed(client):
    await register_and_login(client, prefix="renamer")
    listing = await client.get("/api/collections", params={"name": "Watchlist"})
    watchlist_id = listing.json()[0]["id"]

    res = await client.post("/api/collections", json={"name": "Later", "update_id": watchlist_id})

    assert res.status_code == 400


@pytest.mark.asyncio
async def test_private_collection_contents_are_owner_only(client):
    owner = await register_and_login(client, prefix="owner")
    create_res = await client.post(
        "/api/collections", json={"name": "Secret"}, headers=owner.headers
    )
    collection_id = create_res.json()["id"]
    stranger = await register_and_login(client, prefix="stranger")

    forbidden = await client.get(f"/api/collections/{collection_id}/contents", headers=stranger.headers)
    assert forbidden.status_code == 403

    update = await client.post(
        "/api/collections", json={"name": "Stolen", "update_id": collection_id}, headers=stranger.headers
    )
    assert update.status_code == 403

    allowed = await client.get(f"/api/collections/{collection_id}/contents", headers=owner.headers)
    assert allowed.status_code == 200
    assert allowed.json()["details"]["visibility"] == "private"
