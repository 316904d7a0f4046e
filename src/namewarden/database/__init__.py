"""
Database package for Namewarden.

Public API:
    - db_connection: process-wide aiosqlite connection manager
    - SchemaManager: table/index creation
    - SpamFilterStore: Config Store for protected roles and allowlist entries
"""
