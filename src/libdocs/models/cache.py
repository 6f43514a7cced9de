from __future__ import annotations

from pydantic import BaseModel


class DocsCacheEntry(BaseModel):
    """Raw documentation cached for one ``(library_id, topic)`` key."""

    key: str  # "<library_id>:<topic or 'general'>"
    content: str  # Untruncated provider output
    fetched_at: float  # Epoch seconds from the service clock

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.fetched_at < ttl_seconds
