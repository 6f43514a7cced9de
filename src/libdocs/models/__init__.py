from __future__ import annotations

from libdocs.models.cache import DocsCacheEntry
from libdocs.models.library import DEFAULT_VERSION, CanonicalLibraryId
from libdocs.models.outcome import (
    Degraded,
    DegradedReason,
    DocsOutcome,
    Ok,
    render_placeholder,
)
from libdocs.models.package import PackageMetadata
from libdocs.models.tools import (
    GetLibraryDocsInput,
    GetLibraryDocsOutput,
    ResolveLibraryIdInput,
    ResolveLibraryIdOutput,
)

__all__ = [
    # library
    "CanonicalLibraryId",
    "DEFAULT_VERSION",
    "PackageMetadata",
    # cache
    "DocsCacheEntry",
    # outcome
    "Ok",
    "Degraded",
    "DegradedReason",
    "DocsOutcome",
    "render_placeholder",
    # tools
    "ResolveLibraryIdInput",
    "ResolveLibraryIdOutput",
    "GetLibraryDocsInput",
    "GetLibraryDocsOutput",
]
