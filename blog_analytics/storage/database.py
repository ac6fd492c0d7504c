"""Database storage for blog_analytics.

This module persists the tracked blog collection in SQLite. The whole
collection is stored as one JSON document under a fixed key and rewritten on
every change.
Database location: ~/.blog_analytics/blog_analytics.db (or BLOG_ANALYTICS_DB_PATH env var)
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

import aiosqlite

from blog_analytics.config import get_config
from blog_analytics.models.schemas import BlogMetadata


STORAGE_KEY = "blog_collection"


# Singleton connection
_db_connection: Optional[aiosqlite.Connection] = None


async def get_database(db_path: Optional[Path] = None) -> aiosqlite.Connection:
    """Get or create a singleton database connection.

    Args:
        db_path: Database file (uses the configured path if not provided)

    Returns:
        Active database connection
    """
    global _db_connection

    if _db_connection is None:
        if db_path is None:
            db_path = get_config().db_path
        # Ensure directory exists
        db_path.parent.mkdir(parents=True, exist_ok=True)

        _db_connection = await aiosqlite.connect(db_path)
        _db_connection.row_factory = aiosqlite.Row
        await init_database(_db_connection)

    return _db_connection


async def init_database(db: Optional[aiosqlite.Connection] = None) -> None:
    """Initialize database tables if they don't exist.

    Args:
        db: Optional database connection (uses singleton if not provided)
    """
    if db is None:
        db = await get_database()

    await db.execute("""
        CREATE TABLE IF NOT EXISTS collections (
            key TEXT PRIMARY KEY,
            data TEXT NOT NULL,
            updated_at TIMESTAMP
        )
    """)

    await db.commit()


async def close_database() -> None:
    """Close the database connection."""
    global _db_connection

    if _db_connection is not None:
        await _db_connection.close()
        _db_connection = None


class BlogRepository:
    """Load/save access to the persisted blog collection."""

    def __init__(
        self,
        db: Optional[aiosqlite.Connection] = None,
        key: str = STORAGE_KEY,
        db_path: Optional[Path] = None,
    ):
        self._db = db
        self.key = key
        self.db_path = db_path

    async def _connection(self) -> aiosqlite.Connection:
        if self._db is None:
            self._db = await get_database(self.db_path)
        return self._db

    async def load(self) -> List[BlogMetadata]:
        """Load the collection; empty if nothing was saved yet."""
        db = await self._connection()

        cursor = await db.execute(
            "SELECT data FROM collections WHERE key = ?", (self.key,)
        )
        row = await cursor.fetchone()

        if row is None:
            return []

        return [BlogMetadata.from_dict(item) for item in json.loads(row[0])]

    async def save(self, blogs: Sequence[BlogMetadata]) -> None:
        """Replace the stored collection with `blogs`."""
        db = await self._connection()

        data = json.dumps([blog.to_dict() for blog in blogs])
        await db.execute(
            """
            INSERT INTO collections (key, data, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                data = excluded.data,
                updated_at = excluded.updated_at
            """,
            (self.key, data, datetime.now(timezone.utc).isoformat()),
        )
        await db.commit()
