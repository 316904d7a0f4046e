"""Per-server user and role exemptions from the username spam filter."""

from __future__ import annotations

from typing import Iterable, Tuple

from namewarden.database.spam_filter_store import SpamFilterStore
from namewarden.datatypes.spam_filter_datatypes import (
    EntryQuery,
    SpamFilterEntry,
    SpamFilterObjectType,
)
from namewarden.errors import StoreError


class AllowlistResolver:
    """Answers "is this member exempt?" from the Config Store.

    ``exempt_role_ids`` are roles exempt in every server, coming from the
    application config. Store failures propagate as ``StoreError``.
    """

    def __init__(self, store: SpamFilterStore, exempt_role_ids: Iterable[int] = ()) -> None:
        self.store = store
        self.exempt_role_ids: Tuple[int, ...] = tuple(exempt_role_ids)

    async def is_user_allowlisted(self, server_id: int, member_id: int) -> bool:
        entries = await self.store.find_many(
            EntryQuery(server_id, SpamFilterObjectType.ALLOWLIST_USER, member_id)
        )
        return bool(entries)

    async def is_role_allowlisted(self, server_id: int, role_ids: Iterable[int]) -> bool:
        held = set(role_ids)
        if not held:
            return False
        if not held.isdisjoint(self.exempt_role_ids):
            return True
        allowlisted = await self.store.find_object_ids(
            EntryQuery(server_id, SpamFilterObjectType.ALLOWLIST_ROLE)
        )
        return not held.isdisjoint(allowlisted)

    async def allowlist_user(self, server_id: int, server_name: str, user_id: int, username: str) -> bool:
        """Add ``user_id`` to the server's user allowlist.

        Returns False when the user was already allowlisted.

        Raises:
            StoreError: If the row could not be written.
        """
        result = await self.store.insert_many(
            [SpamFilterEntry(server_id, SpamFilterObjectType.ALLOWLIST_USER, user_id, username, server_name)],
            tolerate_duplicate_key=True,
        )
        if result.failed:
            raise StoreError(f"failed to insert {user_id} into allowlist for server {server_id}")
        return result.inserted == 1
