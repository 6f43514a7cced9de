"""Documentation service: cache lookup, provider dispatch and token budgeting.

Request flow for ``get_or_fetch``::

    cache check ─ fresh ─────────────────────────────────────┐
         └─ miss/stale → dispatch ─ Ok ───────────────→ store ┤→ limit_tokens → str
                              ├─ NOT_FOUND → render ─→ store ┘
                              └─ FETCH_FAILED → placeholder → str

The generic fallback's not-found document is a regular answer: it is cached
and budgeted like fetched docs. Failed fetches are never written to the
cache. Concurrent misses for the same key each dispatch their own fetch; the
last write wins.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from libdocs.cache import cache_key
from libdocs.errors import LibDocsError
from libdocs.models.library import CanonicalLibraryId
from libdocs.models.outcome import Degraded, DegradedReason, DocsOutcome, Ok, render_placeholder
from libdocs.tokens import limit_tokens

if TYPE_CHECKING:
    from collections.abc import Callable

    from libdocs.protocols import CacheProtocol
    from libdocs.providers import FetchContext, ProviderRegistry

DEFAULT_TTL_SECONDS = 3600


class DocsService:
    def __init__(
        self,
        cache: CacheProtocol,
        providers: ProviderRegistry,
        fetch_context: FetchContext,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cache = cache
        self._providers = providers
        self._fetch_context = fetch_context
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self.fetch_count = 0

    async def fetch_outcome(self, library_id: str, topic: str | None = None) -> DocsOutcome:
        """Return cached or freshly fetched documentation as an outcome.

        Only a failed fetch comes back as ``Degraded``; a not-found result is
        rendered to its document and returned as ``Ok``.
        """
        log = structlog.get_logger().bind(library_id=library_id, topic=topic)
        key = cache_key(library_id, topic)

        cached = await self._cache.get(key)
        if cached is not None and cached.is_fresh(self._clock(), self._ttl_seconds):
            log.info("cache_hit")
            return Ok(cached.content)

        log.info("cache_miss_fetching", stale=cached is not None)
        outcome = await self._dispatch(library_id, topic, log)
        if isinstance(outcome, Degraded) and outcome.reason is DegradedReason.NOT_FOUND:
            log.info("docs_not_found", detail=outcome.detail)
            outcome = Ok(render_placeholder(outcome))

        if isinstance(outcome, Ok):
            await self._cache.set(key, outcome.content, self._clock())
            log.info("fetch_complete", content_length=len(outcome.content))
        return outcome

    async def get_or_fetch(
        self,
        library_id: str,
        topic: str | None,
        max_tokens: int,
    ) -> str:
        """Return documentation text within ``max_tokens``. Never raises for fetch failures."""
        outcome = await self.fetch_outcome(library_id, topic)
        if isinstance(outcome, Degraded):
            return render_placeholder(outcome)
        return limit_tokens(outcome.content, max_tokens)

    async def _dispatch(
        self,
        library_id: str,
        topic: str | None,
        log: structlog.typing.FilteringBoundLogger,
    ) -> DocsOutcome:
        self.fetch_count += 1
        try:
            library = CanonicalLibraryId.parse(library_id)
            provider = self._providers.get(library.name)
            return await provider.fetch(library, topic, self._fetch_context)
        except LibDocsError as exc:
            log.warning("docs_fetch_failed", code=exc.code, message=exc.message)
            return Degraded(DegradedReason.FETCH_FAILED, library_id, detail=exc.message)
        except Exception as exc:
            # Parse failures and anything else a provider lets through still
            # degrade to placeholder text; the traceback is kept in the log.
            log.error("docs_fetch_unexpected_error", exc_info=True)
            return Degraded(DegradedReason.FETCH_FAILED, library_id, detail=repr(exc))
