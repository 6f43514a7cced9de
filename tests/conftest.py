"""Shared test fixtures for the libdocs test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import aiosqlite
import httpx
import pytest

from libdocs.cache import MemoryCache, SqliteCache
from libdocs.config import Settings
from libdocs.fetcher import Fetcher
from libdocs.package_registry import PackageRegistry
from libdocs.providers import FetchContext

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
def fetcher(http_client: httpx.AsyncClient, settings: Settings) -> Fetcher:
    return Fetcher(http_client, settings.fetcher)


@pytest.fixture()
def package_registry(fetcher: Fetcher, settings: Settings) -> PackageRegistry:
    return PackageRegistry(fetcher, settings.registry)


@pytest.fixture()
def fetch_context(fetcher: Fetcher, package_registry: PackageRegistry) -> FetchContext:
    return FetchContext(fetcher=fetcher, registry=package_registry)


@pytest.fixture()
def memory_cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture()
async def sqlite_cache() -> AsyncIterator[SqliteCache]:
    async with aiosqlite.connect(":memory:") as db:
        cache = SqliteCache(db)
        await cache.init_db()
        yield cache
