"""Unit tests for libdocs.cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from libdocs.cache import cache_key
from libdocs.models.cache import DocsCacheEntry

if TYPE_CHECKING:
    from libdocs.cache import MemoryCache, SqliteCache

NOW = 1_700_000_000.0


class TestCacheKey:
    def test_with_topic(self) -> None:
        assert cache_key("react@18.2.0", "hooks") == "react@18.2.0:hooks"

    def test_without_topic(self) -> None:
        assert cache_key("react@18.2.0", None) == "react@18.2.0:general"

    def test_empty_topic_is_general(self) -> None:
        assert cache_key("react@18.2.0", "") == "react@18.2.0:general"


class TestDocsCacheEntry:
    def test_fresh_within_ttl(self) -> None:
        entry = DocsCacheEntry(key="k", content="c", fetched_at=NOW)
        assert entry.is_fresh(NOW + 3599, 3600)

    def test_stale_at_ttl(self) -> None:
        entry = DocsCacheEntry(key="k", content="c", fetched_at=NOW)
        assert not entry.is_fresh(NOW + 3600, 3600)


# ---------------------------------------------------------------------------
# MemoryCache
# ---------------------------------------------------------------------------


class TestMemoryCache:
    async def test_set_and_get(self, memory_cache: MemoryCache) -> None:
        await memory_cache.set("react@18.2.0:general", "# React", NOW)
        entry = await memory_cache.get("react@18.2.0:general")
        assert entry == DocsCacheEntry(key="react@18.2.0:general", content="# React", fetched_at=NOW)

    async def test_get_nonexistent_returns_none(self, memory_cache: MemoryCache) -> None:
        assert await memory_cache.get("missing:general") is None

    async def test_overwrite_in_place(self, memory_cache: MemoryCache) -> None:
        await memory_cache.set("k", "Version 1", NOW)
        await memory_cache.set("k", "Version 2", NOW + 10)
        entry = await memory_cache.get("k")
        assert entry is not None
        assert entry.content == "Version 2"
        assert entry.fetched_at == NOW + 10
        assert len(memory_cache) == 1


# ---------------------------------------------------------------------------
# SqliteCache
# ---------------------------------------------------------------------------


class TestSqliteCache:
    async def test_set_and_get(self, sqlite_cache: SqliteCache) -> None:
        await sqlite_cache.set("react@18.2.0:hooks", "# Hooks", NOW)
        entry = await sqlite_cache.get("react@18.2.0:hooks")
        assert entry is not None
        assert entry.key == "react@18.2.0:hooks"
        assert entry.content == "# Hooks"
        assert entry.fetched_at == NOW

    async def test_get_nonexistent_returns_none(self, sqlite_cache: SqliteCache) -> None:
        assert await sqlite_cache.get("missing:general") is None

    async def test_upsert_overwrites(self, sqlite_cache: SqliteCache) -> None:
        await sqlite_cache.set("k", "Version 1", NOW)
        await sqlite_cache.set("k", "Version 2", NOW + 10)
        entry = await sqlite_cache.get("k")
        assert entry is not None
        assert entry.content == "Version 2"

        cursor = await sqlite_cache._db.execute("SELECT COUNT(*) FROM docs_cache")
        row = await cursor.fetchone()
        assert row is not None
        assert row[0] == 1

    async def test_init_db_is_idempotent(self, sqlite_cache: SqliteCache) -> None:
        await sqlite_cache.set("k", "kept", NOW)
        await sqlite_cache.init_db()
        entry = await sqlite_cache.get("k")
        assert entry is not None
        assert entry.content == "kept"


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


class TestSqliteCacheErrors:
    async def test_read_error_returns_none(self, sqlite_cache: SqliteCache) -> None:
        await sqlite_cache._db.execute("DROP TABLE docs_cache")
        await sqlite_cache._db.commit()
        assert await sqlite_cache.get("k") is None

    async def test_write_error_does_not_raise(self, sqlite_cache: SqliteCache) -> None:
        await sqlite_cache._db.execute("DROP TABLE docs_cache")
        await sqlite_cache._db.commit()
        await sqlite_cache.set("k", "content", NOW)
