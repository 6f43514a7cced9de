"""Integration test fixtures.

Provides a fully wired AppState with an in-memory cache, a fake clock and a
real httpx client (mocked per test with respx). Lower-level fixtures come
from tests/conftest.py.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from libdocs.docs import DocsService
from libdocs.providers import build_default_registry
from libdocs.resolver import AliasTable
from libdocs.state import AppState

if TYPE_CHECKING:
    from pathlib import Path

    import httpx

    from libdocs.cache import MemoryCache
    from libdocs.config import Settings
    from libdocs.package_registry import PackageRegistry
    from libdocs.providers import FetchContext
    from tests.conftest import FakeClock


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Forces stdio transport and the in-memory cache, and points the registry
    at an unroutable address so nothing leaves the machine.
    """
    env = os.environ.copy()
    env["LIBDOCS__SERVER__TRANSPORT"] = "stdio"
    env["LIBDOCS__CACHE__BACKEND"] = "memory"
    env["LIBDOCS__CACHE__DB_PATH"] = str(tmp_path / "cache.db")
    env["LIBDOCS__REGISTRY__URL"] = "http://127.0.0.1:1"
    env["LIBDOCS__FETCHER__SSRF_PRIVATE_IP_CHECK"] = "false"
    env["LIBDOCS__LOGGING__FORMAT"] = "text"
    return env


@pytest.fixture()
def app_state(
    settings: Settings,
    http_client: httpx.AsyncClient,
    package_registry: PackageRegistry,
    fetch_context: FetchContext,
    memory_cache: MemoryCache,
    clock: FakeClock,
) -> AppState:
    """Full AppState wired with the default provider registry."""
    providers = build_default_registry()
    docs = DocsService(
        memory_cache,
        providers,
        fetch_context,
        ttl_seconds=settings.cache.ttl_seconds,
        clock=clock,
    )
    return AppState(
        settings=settings,
        aliases=AliasTable(),
        providers=providers,
        registry=package_registry,
        cache=memory_cache,
        docs=docs,
        http_client=http_client,
    )
