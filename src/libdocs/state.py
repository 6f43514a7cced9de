"""Application state container.

AppState is created once at startup by ``open_app_state`` and passed to every
tool handler. It owns the alias table and the documentation cache, so there
is no module-level mutable state anywhere in the package.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite
import structlog

from libdocs.cache import MemoryCache, SqliteCache
from libdocs.docs import DocsService
from libdocs.fetcher import Fetcher, build_http_client
from libdocs.package_registry import PackageRegistry
from libdocs.providers import FetchContext, build_default_registry
from libdocs.resolver import AliasTable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

    from libdocs.config import Settings
    from libdocs.protocols import CacheProtocol
    from libdocs.providers import ProviderRegistry

log = structlog.get_logger()


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    aliases: AliasTable
    providers: ProviderRegistry
    registry: PackageRegistry
    cache: CacheProtocol
    docs: DocsService
    http_client: httpx.AsyncClient | None = None


@asynccontextmanager
async def open_app_state(settings: Settings) -> AsyncIterator[AppState]:
    """Create all shared resources and release them on exit."""
    http_client = build_http_client(settings.fetcher)
    fetcher = Fetcher(http_client, settings.fetcher)
    registry = PackageRegistry(fetcher, settings.registry)
    providers = build_default_registry()

    db: aiosqlite.Connection | None = None
    cache: CacheProtocol
    if settings.cache.backend == "sqlite":
        db_path = Path(settings.cache.db_path).expanduser()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        db = await aiosqlite.connect(str(db_path))
        sqlite_cache = SqliteCache(db)
        await sqlite_cache.init_db()
        cache = sqlite_cache
    else:
        cache = MemoryCache()

    docs = DocsService(
        cache,
        providers,
        FetchContext(
            fetcher=fetcher,
            registry=registry,
            readme_branch=settings.registry.readme_branch,
        ),
        ttl_seconds=settings.cache.ttl_seconds,
    )
    state = AppState(
        settings=settings,
        aliases=AliasTable(),
        providers=providers,
        registry=registry,
        cache=cache,
        docs=docs,
        http_client=http_client,
    )
    log.info(
        "app_state_ready",
        cache_backend=settings.cache.backend,
        dedicated_providers=sorted(providers.names()),
    )

    try:
        yield state
    finally:
        await http_client.aclose()
        if db is not None:
            await db.close()
        log.info("app_state_closed")
