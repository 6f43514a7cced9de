"""Internal result of a documentation fetch.

Providers and DocsService return ``Ok`` or ``Degraded`` so that callers and
tests can tell real documentation apart from failure text. The public tool
contract is a plain string; ``render_placeholder`` is the only place a
``Degraded`` outcome turns into text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from libdocs.models.library import CanonicalLibraryId


class DegradedReason(StrEnum):
    FETCH_FAILED = "fetch_failed"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Ok:
    content: str


@dataclass(frozen=True)
class Degraded:
    reason: DegradedReason
    library_id: str
    detail: str = ""


DocsOutcome = Ok | Degraded

FETCH_FAILED_PHRASE = "Could not fetch documentation for"
NOT_FOUND_PHRASE = (
    "No documentation could be found for this library. "
    "Please check the library name or try a different library."
)


def render_placeholder(degraded: Degraded) -> str:
    if degraded.reason is DegradedReason.FETCH_FAILED:
        return (
            f"{FETCH_FAILED_PHRASE} {degraded.library_id}. "
            "Please try a different library or check the library name."
        )
    library = CanonicalLibraryId.parse(degraded.library_id)
    return f"# {library.name} Documentation (v{library.version})\n\n{NOT_FOUND_PHRASE}"
