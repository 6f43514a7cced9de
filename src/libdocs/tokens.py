"""Approximate token budgeting.

Tokens are approximated by whitespace-delimited segments. The count is a
cheap proxy, used only to keep responses within a
caller-supplied budget.
"""

from __future__ import annotations

import re

TRUNCATION_NOTICE = "\n\n[Documentation truncated due to token limit]"

_WHITESPACE_RE = re.compile(r"\s+")


def _segments(text: str) -> list[str]:
    # Leading or trailing whitespace yields an empty segment that still counts.
    return _WHITESPACE_RE.split(text)


def count_tokens(text: str) -> int:
    """Return the approximate token count of ``text``."""
    return len(_segments(text))


def limit_tokens(text: str, max_tokens: int) -> str:
    """Truncate ``text`` to at most ``max_tokens`` segments.

    Text within budget is returned unchanged. Otherwise the first
    ``max_tokens`` segments are re-joined with single spaces and
    ``TRUNCATION_NOTICE`` is appended. A non-positive budget yields only
    the notice.
    """
    segments = _segments(text)
    if len(segments) <= max_tokens:
        return text
    kept = segments[: max(max_tokens, 0)]
    return " ".join(kept) + TRUNCATION_NOTICE
