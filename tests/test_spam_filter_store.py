"""Tests for the SQLite-backed Config Store."""

import pytest
import pytest_asyncio

from namewarden.database.db_connection import ConnectionManager
from namewarden.database.db_schema import SchemaManager
from namewarden.database.spam_filter_store import SpamFilterStore
from namewarden.datatypes.spam_filter_datatypes import EntryQuery, SpamFilterEntry, SpamFilterObjectType
from namewarden.errors import DuplicateKeyError, StoreError

ROLE = SpamFilterObjectType.HIGH_RANKING_ROLE
USER = SpamFilterObjectType.ALLOWLIST_USER


@pytest_asyncio.fixture
async def connection(tmp_path):
    manager = ConnectionManager()
    await manager.open(tmp_path / "data" / "test.db")
    await SchemaManager.initialize_schema(manager.connection)
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def store(connection):
    return SpamFilterStore(connection)


@pytest.mark.asyncio
async def test_insert_and_find(store):
    result = await store.insert_many([
        SpamFilterEntry(1, ROLE, 10, "Genesis Squad", "Guild"),
        SpamFilterEntry(1, ROLE, 11, "Core Team", "Guild"),
        SpamFilterEntry(2, ROLE, 12, "Elsewhere", "Other"),
    ])

    assert result.inserted == 3
    assert result.duplicates == 0
    assert result.failed == []

    entries = await store.find_many(EntryQuery(1, ROLE))
    assert {entry.object_id for entry in entries} == {10, 11}
    assert entries[0].server_name == "Guild"
    assert entries[0].object_type is ROLE


@pytest.mark.asyncio
async def test_find_filters_by_object_type_and_id(store):
    await store.insert_many([
        SpamFilterEntry(1, ROLE, 10),
        SpamFilterEntry(1, USER, 10),
        SpamFilterEntry(1, USER, 20),
    ])

    assert await store.find_object_ids(EntryQuery(1, USER)) == {10, 20}
    assert await store.find_object_ids(EntryQuery(1, USER, 20)) == {20}
    assert await store.find_object_ids(EntryQuery(1, USER, 30)) == set()


@pytest.mark.asyncio
async def test_duplicates_are_counted_when_tolerated(store):
    await store.insert_many([SpamFilterEntry(1, USER, 10)])

    result = await store.insert_many([SpamFilterEntry(1, USER, 10), SpamFilterEntry(1, USER, 11)])

    assert result.inserted == 1
    assert result.duplicates == 1
    assert await store.find_object_ids(EntryQuery(1, USER)) == {10, 11}


@pytest.mark.asyncio
async def test_duplicate_raises_when_not_tolerated(store):
    await store.insert_many([SpamFilterEntry(1, USER, 10)])

    with pytest.raises(DuplicateKeyError):
        await store.insert_many(
            [SpamFilterEntry(1, USER, 11), SpamFilterEntry(1, USER, 10)],
            tolerate_duplicate_key=False,
        )

    # Rows written before the collision stay written
    assert await store.find_object_ids(EntryQuery(1, USER)) == {10, 11}


@pytest.mark.asyncio
async def test_delete_one(store):
    await store.insert_many([SpamFilterEntry(1, ROLE, 10), SpamFilterEntry(1, ROLE, 11)])

    assert await store.delete_one(EntryQuery(1, ROLE, 10)) is True
    assert await store.delete_one(EntryQuery(1, ROLE, 10)) is False
    assert await store.find_object_ids(EntryQuery(1, ROLE)) == {11}


@pytest.mark.asyncio
async def test_delete_one_requires_object_id(store):
    with pytest.raises(ValueError):
        await store.delete_one(EntryQuery(1, ROLE))


@pytest.mark.asyncio
async def test_closed_connection_raises_store_error():
    store = SpamFilterStore(ConnectionManager())

    with pytest.raises(StoreError):
        await store.find_many(EntryQuery(1, ROLE))
    with pytest.raises(StoreError):
        await store.insert_many([SpamFilterEntry(1, ROLE, 10)])


@pytest.mark.asyncio
async def test_schema_initialization_is_idempotent(connection):
    await SchemaManager.initialize_schema(connection.connection)

    async with connection.read() as conn:
        async with conn.execute("SELECT version FROM schema_version") as cursor:
            rows = await cursor.fetchall()
    assert [row["version"] for row in rows] == [1]
