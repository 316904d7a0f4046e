"""Tests for AllowlistResolver."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from namewarden.datatypes.spam_filter_datatypes import (
    EntryQuery,
    InsertManyResult,
    SpamFilterEntry,
    SpamFilterObjectType,
)
from namewarden.errors import StoreError
from namewarden.spam_filter.allowlist_resolver import AllowlistResolver


def _store(user_entries=(), role_ids=()):
    store = MagicMock()
    store.find_many = AsyncMock(return_value=list(user_entries))
    store.find_object_ids = AsyncMock(return_value=set(role_ids))
    store.insert_many = AsyncMock(return_value=InsertManyResult(inserted=1))
    return store


@pytest.mark.asyncio
async def test_user_allowlisted():
    entry = SpamFilterEntry(1, SpamFilterObjectType.ALLOWLIST_USER, 42)
    store = _store(user_entries=[entry])
    resolver = AllowlistResolver(store)

    assert await resolver.is_user_allowlisted(1, 42) is True
    store.find_many.assert_awaited_once_with(EntryQuery(1, SpamFilterObjectType.ALLOWLIST_USER, 42))


@pytest.mark.asyncio
async def test_user_not_allowlisted():
    resolver = AllowlistResolver(_store())
    assert await resolver.is_user_allowlisted(1, 42) is False


@pytest.mark.asyncio
async def test_role_allowlisted_from_store():
    store = _store(role_ids={7})
    resolver = AllowlistResolver(store)

    assert await resolver.is_role_allowlisted(1, [5, 7]) is True
    assert await resolver.is_role_allowlisted(1, [5]) is False
    store.find_object_ids.assert_awaited_with(EntryQuery(1, SpamFilterObjectType.ALLOWLIST_ROLE))


@pytest.mark.asyncio
async def test_config_exempt_role_skips_store():
    store = _store()
    resolver = AllowlistResolver(store, exempt_role_ids=[9])

    assert await resolver.is_role_allowlisted(1, {9}) is True
    store.find_object_ids.assert_not_awaited()


@pytest.mark.asyncio
async def test_member_without_roles_is_not_role_allowlisted():
    store = _store(role_ids={7})
    resolver = AllowlistResolver(store)

    assert await resolver.is_role_allowlisted(1, []) is False
    store.find_object_ids.assert_not_awaited()


@pytest.mark.asyncio
async def test_store_errors_propagate():
    store = _store()
    store.find_many.side_effect = StoreError("down")
    resolver = AllowlistResolver(store)

    with pytest.raises(StoreError):
        await resolver.is_user_allowlisted(1, 42)


@pytest.mark.asyncio
async def test_allowlist_user_inserts_row():
    store = _store()
    resolver = AllowlistResolver(store)

    assert await resolver.allowlist_user(1, "Guild", 42, "someone") is True

    entries = store.insert_many.await_args.args[0]
    assert entries == [SpamFilterEntry(1, SpamFilterObjectType.ALLOWLIST_USER, 42, "someone", "Guild")]
    assert store.insert_many.await_args.kwargs == {"tolerate_duplicate_key": True}


@pytest.mark.asyncio
async def test_allowlist_user_already_present():
    store = _store()
    store.insert_many.return_value = InsertManyResult(duplicates=1)
    resolver = AllowlistResolver(store)

    assert await resolver.allowlist_user(1, "Guild", 42, "someone") is False


@pytest.mark.asyncio
async def test_allowlist_user_failure_raises():
    store = _store()
    entry = SpamFilterEntry(1, SpamFilterObjectType.ALLOWLIST_USER, 42)
    store.insert_many.return_value = InsertManyResult(failed=[entry])
    resolver = AllowlistResolver(store)

    with pytest.raises(StoreError):
        await resolver.allowlist_user(1, "Guild", 42, "someone")
