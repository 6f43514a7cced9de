"""Documentation cache backends.

Both backends store one entry per ``(library_id, topic)`` key and overwrite
it in place on refetch. Freshness is decided by DocsService against its own
clock; the backends only record ``fetched_at``. There is no size bound and
no eviction: entries live until overwritten or until the backing store goes
away (process exit for MemoryCache, file deletion for SqliteCache).

SqliteCache catches ``aiosqlite.Error`` internally and degrades gracefully:
read failures return ``None`` (treated as a miss), write failures are logged
and ignored (fetched content is still returned to the caller).
"""

from __future__ import annotations

import aiosqlite
import structlog

from libdocs.models.cache import DocsCacheEntry

log = structlog.get_logger()


def cache_key(library_id: str, topic: str | None) -> str:
    return f"{library_id}:{topic or 'general'}"


class MemoryCache:
    """In-process dict cache implementing CacheProtocol."""

    def __init__(self) -> None:
        self._entries: dict[str, DocsCacheEntry] = {}

    async def get(self, key: str) -> DocsCacheEntry | None:
        return self._entries.get(key)

    async def set(self, key: str, content: str, fetched_at: float) -> None:
        self._entries[key] = DocsCacheEntry(key=key, content=content, fetched_at=fetched_at)

    def __len__(self) -> int:
        return len(self._entries)


_CREATE_DOCS_TABLE = """
CREATE TABLE IF NOT EXISTS docs_cache (
    cache_key  TEXT PRIMARY KEY,
    content    TEXT NOT NULL,
    fetched_at REAL NOT NULL
)
"""


class SqliteCache:
    """SQLite-backed cache implementing CacheProtocol."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def init_db(self) -> None:
        """Create the table and set WAL mode. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_DOCS_TABLE)
        await self._db.commit()

    async def get(self, key: str) -> DocsCacheEntry | None:
        """Read an entry. Returns ``None`` on cache miss or read failure."""
        try:
            cursor = await self._db.execute(
                "SELECT cache_key, content, fetched_at FROM docs_cache WHERE cache_key = ?",
                (key,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return DocsCacheEntry(key=row[0], content=row[1], fetched_at=row[2])
        except aiosqlite.Error:
            log.warning("cache_read_error", key=key, exc_info=True)
            return None

    async def set(self, key: str, content: str, fetched_at: float) -> None:
        """Write an entry, replacing any previous one. Non-fatal on failure."""
        try:
            await self._db.execute(
                "INSERT OR REPLACE INTO docs_cache (cache_key, content, fetched_at) "
                "VALUES (?, ?, ?)",
                (key, content, fetched_at),
            )
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_write_error", key=key, exc_info=True)
