"""Tests for the DocumentStore adapter (over mongomock-motor)."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import PyMongoError

from dreamdesk.database import ensure_indexes
from dreamdesk.services.document_store import DocumentStore, StoreOperationError
from dreamdesk.services.query import limit, order_by, where


@pytest.mark.asyncio
async def test_create_generates_id_and_reads_back(store):
    record = await store.create("notes", {"title": "First", "userId": "u1"})
    assert record["id"]
    assert record["title"] == "First"

    fetched = await store.get_by_id("notes", record["id"])
    assert fetched == {"id": record["id"], "title": "First", "userId": "u1"}


@pytest.mark.asyncio
async def test_create_with_explicit_id(store):
    record = await store.create("users", {"email": "a@example.com"}, id="user_1")
    assert record == {"id": "user_1", "email": "a@example.com"}
    assert (await store.get_by_id("users", "user_1"))["email"] == "a@example.com"


@pytest.mark.asyncio
async def test_get_by_id_missing_returns_none(store):
    assert await store.get_by_id("notes", "nope") is None


@pytest.mark.asyncio
async def test_get_all_filters_and_sorts(store):
    await store.create("notes", {"userId": "u1", "rank": 2})
    await store.create("notes", {"userId": "u1", "rank": 3})
    await store.create("notes", {"userId": "u1", "rank": 1})
    await store.create("notes", {"userId": "u2", "rank": 9})

    records = await store.get_all("notes", [where("userId", "==", "u1"), order_by("rank", "desc")])
    assert [r["rank"] for r in records] == [3, 2, 1]

    top = await store.get_all("notes", [where("userId", "==", "u1"), order_by("rank"), limit(2)])
    assert [r["rank"] for r in top] == [1, 2]


@pytest.mark.asyncio
async def test_get_all_range_filter(store):
    for score in (2, 5, 8):
        await store.create("businessIdeas", {"userId": "u1", "feasibilityScore": score})
    records = await store.get_all(
        "businessIdeas", [where("feasibilityScore", ">=", 4), where("feasibilityScore", "<=", 8)]
    )
    assert sorted(r["feasibilityScore"] for r in records) == [5, 8]


@pytest.mark.asyncio
async def test_update_sets_only_given_fields(store):
    record = await store.create("notes", {"title": "Old", "content": "keep"})
    await store.update("notes", record["id"], {"title": "New", "id": "ignored"})
    fetched = await store.get_by_id("notes", record["id"])
    assert fetched["title"] == "New"
    assert fetched["content"] == "keep"
    assert fetched["id"] == record["id"]


@pytest.mark.asyncio
async def test_delete_and_delete_where(store):
    a = await store.create("notes", {"userId": "u1"})
    await store.create("notes", {"userId": "u1"})
    await store.create("notes", {"userId": "u2"})

    await store.delete("notes", a["id"])
    assert await store.get_by_id("notes", a["id"]) is None

    deleted = await store.delete_where("notes", [where("userId", "==", "u1")])
    assert deleted == 1
    remaining = await store.get_all("notes")
    assert [r["userId"] for r in remaining] == ["u2"]


@pytest.mark.asyncio
async def test_delete_where_requires_filter(store):
    with pytest.raises(ValueError):
        await store.delete_where("notes", [order_by("title")])


@pytest.mark.asyncio
async def test_increment_is_floored(store):
    await store.create("users", {"stats": {"notesCount": 1}}, id="u1")

    assert await store.increment("users", "u1", "stats.notesCount", -1) is True
    assert await store.increment("users", "u1", "stats.notesCount", -1) is False
    assert (await store.get_by_id("users", "u1"))["stats"]["notesCount"] == 0

    assert await store.increment("users", "u1", "stats.notesCount", 1, extra={"touched": True}) is True
    fetched = await store.get_by_id("users", "u1")
    assert fetched["stats"]["notesCount"] == 1
    assert fetched["touched"] is True


@pytest.mark.asyncio
async def test_increment_missing_document(store):
    assert await store.increment("users", "ghost", "stats.notesCount", 1) is False
    assert await store.get_by_id("users", "ghost") is None


@pytest.mark.asyncio
async def test_driver_errors_become_store_operation_error():
    collection = MagicMock()
    collection.find_one = AsyncMock(side_effect=PyMongoError("connection refused"))
    database = MagicMock()
    database.__getitem__.return_value = collection
    store = DocumentStore(database)

    with pytest.raises(StoreOperationError) as excinfo:
        await store.get_by_id("notes", "x")
    assert excinfo.value.operation == "get_by_id"
    assert excinfo.value.collection == "notes"


@pytest.mark.asyncio
async def test_content_indexes():
    database = AsyncMongoMockClient()["dreamdesk_index_test"]
    await ensure_indexes(database)
    for collection in ("notes", "businessIdeas", "libraryResources"):
        indexes = await database[collection].index_information()
        assert [("userId", 1), ("updatedAt", -1)] in [index["key"] for index in indexes.values()]
