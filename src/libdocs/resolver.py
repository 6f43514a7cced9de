"""Library identifier resolution.

Maps a free-text library name to a canonical ``name@version`` identifier:
alias table first, then the package registry's latest version. Registry
failures degrade to ``name@latest`` and are not remembered, so the next
resolution of the same name retries the registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from libdocs.errors import LibDocsError
from libdocs.models.library import DEFAULT_VERSION, CanonicalLibraryId

if TYPE_CHECKING:
    from collections.abc import Mapping

    from libdocs.package_registry import PackageRegistry

log = structlog.get_logger()

SEED_ALIASES: Mapping[str, str] = {
    "react": "react@18.2.0",
    "next.js": "nextjs@14.0.0",
    "nextjs": "nextjs@14.0.0",
    "vue": "vue@3.3.4",
    "angular": "angular@17.0.0",
    "express": "express@4.18.2",
    "node": "node@20.0.0",
    "typescript": "typescript@5.2.2",
    "tailwind": "tailwindcss@3.3.3",
    "tailwindcss": "tailwindcss@3.3.3",
}


class AliasTable:
    """Normalised name → canonical id. Grows with each successful lookup, never shrinks."""

    def __init__(self, seed: Mapping[str, str] = SEED_ALIASES) -> None:
        self._entries: dict[str, CanonicalLibraryId] = {
            name: CanonicalLibraryId.parse(library_id) for name, library_id in seed.items()
        }

    def get(self, name: str) -> CanonicalLibraryId | None:
        return self._entries.get(name)

    def remember(self, name: str, library_id: CanonicalLibraryId) -> None:
        self._entries[name] = library_id

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def normalise_name(raw: str) -> str:
    return raw.lower().strip()


async def resolve_library_id(
    library_name: str,
    aliases: AliasTable,
    registry: PackageRegistry,
) -> CanonicalLibraryId:
    """Resolve ``library_name`` to a canonical id. Never raises for lookup failures."""
    name = normalise_name(library_name)

    known = aliases.get(name)
    if known is not None:
        log.debug("resolve_alias_hit", name=name, library_id=str(known))
        return known

    try:
        version = await registry.latest_version(name)
    except LibDocsError as exc:
        log.info("registry_lookup_failed", name=name, code=exc.code, message=exc.message)
        return CanonicalLibraryId(name=name, version=DEFAULT_VERSION)

    library_id = CanonicalLibraryId(name=name, version=version)
    aliases.remember(name, library_id)
    log.info("resolve_registry_hit", name=name, library_id=str(library_id))
    return library_id
