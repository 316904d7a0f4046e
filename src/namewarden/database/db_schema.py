"""
Database schema initialization.

Handles creation of the spam filter table, its indexes, and schema version tracking.
"""

import aiosqlite
from namewarden.util.logger import get_logger

logger = get_logger("database_schema")

SCHEMA_VERSION = 1


class SchemaManager:
    """Creates the tables and indexes the Config Store relies on."""

    @staticmethod
    async def initialize_schema(db: aiosqlite.Connection) -> None:
        """
        Create all database tables and indexes if they are missing.

        Args:
            db: Open database connection
        """
        await SchemaManager._create_tables(db)
        await SchemaManager._create_indexes(db)
        await SchemaManager._update_schema_version(db)
        await db.commit()
        logger.info("[SCHEMA] Database schema initialized")

    @staticmethod
    async def _create_tables(db: aiosqlite.Connection) -> None:
        """Create all required database tables."""
        # Protected roles and allowlist entries share one table keyed by object_type
        await db.execute("""
            CREATE TABLE IF NOT EXISTS username_spam_filter (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                object_type TEXT NOT NULL,
                discord_object_id INTEGER NOT NULL,
                discord_object_name TEXT NOT NULL DEFAULT '',
                discord_server_id INTEGER NOT NULL,
                discord_server_name TEXT NOT NULL DEFAULT '',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                UNIQUE (discord_server_id, object_type, discord_object_id)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    @staticmethod
    async def _create_indexes(db: aiosqlite.Connection) -> None:
        """Create indexes for the per-server lookups done on every member event."""
        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_username_spam_filter_lookup "
            "ON username_spam_filter(discord_server_id, object_type)"
        )

    @staticmethod
    async def _update_schema_version(db: aiosqlite.Connection) -> None:
        """Update schema version tracking."""
        await db.execute("INSERT OR IGNORE INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
