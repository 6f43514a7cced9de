"""Protocol interfaces for swappable components.

DocsService and AppState reference these protocols, not the concrete
implementations, so tests can use lightweight doubles and the cache backend
can be chosen from configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from libdocs.models.cache import DocsCacheEntry


class CacheProtocol(Protocol):
    """Interface for the documentation cache backend."""

    async def get(self, key: str) -> DocsCacheEntry | None: ...

    async def set(self, key: str, content: str, fetched_at: float) -> None: ...


class FetcherProtocol(Protocol):
    """Interface for the HTTP fetcher."""

    async def fetch(self, url: str) -> str: ...
