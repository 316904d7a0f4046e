"""
Config Store for the username spam filter.

Rows are addressed by (server id, object type, object id) and live in the
``username_spam_filter`` table. Reads raise :class:`StoreError` on failure.
Batch inserts are unordered and not atomic: each row is written in its own
transaction so a failing row never rolls back the rows before it.
"""

from __future__ import annotations

from typing import Iterable, List

import aiosqlite

from namewarden.database.db_connection import ConnectionManager
from namewarden.datatypes.spam_filter_datatypes import (
    EntryQuery,
    InsertManyResult,
    SpamFilterEntry,
    SpamFilterObjectType,
)
from namewarden.errors import DuplicateKeyError, StoreError
from namewarden.util.logger import get_logger

logger = get_logger("spam_filter_store")


def _row_to_entry(row: aiosqlite.Row) -> SpamFilterEntry:
    return SpamFilterEntry(
        server_id=row["discord_server_id"],
        object_type=SpamFilterObjectType(row["object_type"]),
        object_id=row["discord_object_id"],
        object_name=row["discord_object_name"],
        server_name=row["discord_server_name"],
    )


class SpamFilterStore:
    """CRUD over the ``username_spam_filter`` table."""

    def __init__(self, db: ConnectionManager) -> None:
        self._db = db

    def _ensure_open(self) -> None:
        if not self._db.is_open:
            raise StoreError("Config Store is not connected")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_many(self, query: EntryQuery) -> List[SpamFilterEntry]:
        """Return every row matching ``query``."""
        self._ensure_open()
        sql = (
            "SELECT object_type, discord_object_id, discord_object_name, "
            "discord_server_id, discord_server_name FROM username_spam_filter "
            "WHERE discord_server_id = ? AND object_type = ?"
        )
        params: list = [query.server_id, query.object_type.value]
        if query.object_id is not None:
            sql += " AND discord_object_id = ?"
            params.append(query.object_id)

        try:
            async with self._db.read() as conn:
                async with conn.execute(sql, params) as cursor:
                    rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise StoreError(f"failed to query {query.object_type} for server {query.server_id}") from exc

        return [_row_to_entry(row) for row in rows]

    async def find_object_ids(self, query: EntryQuery) -> set[int]:
        return {entry.object_id for entry in await self.find_many(query)}

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert_many(
        self,
        entries: Iterable[SpamFilterEntry],
        *,
        tolerate_duplicate_key: bool = True,
    ) -> InsertManyResult:
        """Insert ``entries`` one by one.

        Duplicate rows are counted and skipped when ``tolerate_duplicate_key``
        is set, otherwise :class:`DuplicateKeyError` is raised (rows already
        written stay written). Any other failing row is logged and reported in
        ``InsertManyResult.failed``.
        """
        self._ensure_open()
        result = InsertManyResult()

        for entry in entries:
            try:
                async with self._db.transaction() as conn:
                    await conn.execute(
                        """
                        INSERT INTO username_spam_filter (
                            object_type, discord_object_id, discord_object_name,
                            discord_server_id, discord_server_name
                        ) VALUES (?, ?, ?, ?, ?)
                        """,
                        (
                            entry.object_type.value,
                            entry.object_id,
                            entry.object_name,
                            entry.server_id,
                            entry.server_name,
                        ),
                    )
            except aiosqlite.IntegrityError as exc:
                if not tolerate_duplicate_key:
                    raise DuplicateKeyError(
                        f"{entry.object_type} {entry.object_id} already exists for server {entry.server_id}"
                    ) from exc
                logger.info(
                    "[SPAM FILTER STORE] dup key found for %s %s in server %s, proceeding",
                    entry.object_type, entry.object_id, entry.server_id,
                )
                result.duplicates += 1
            except aiosqlite.Error:
                logger.exception(
                    "[SPAM FILTER STORE] failed to store %s %s for server %s",
                    entry.object_type, entry.object_id, entry.server_id,
                )
                result.failed.append(entry)
            else:
                result.inserted += 1

        return result

    async def delete_one(self, query: EntryQuery) -> bool:
        """Delete the row addressed by ``query``. Returns True if a row was removed."""
        if query.object_id is None:
            raise ValueError("delete_one requires an object_id")
        self._ensure_open()

        try:
            async with self._db.transaction() as conn:
                cursor = await conn.execute(
                    "DELETE FROM username_spam_filter "
                    "WHERE discord_server_id = ? AND object_type = ? AND discord_object_id = ?",
                    (query.server_id, query.object_type.value, query.object_id),
                )
                deleted = cursor.rowcount
        except aiosqlite.Error as exc:
            raise StoreError(
                f"failed to delete {query.object_type} {query.object_id} for server {query.server_id}"
            ) from exc

        return deleted > 0
