"""npm registry client.

Two lookups are used: the ``/<name>/latest`` document for identifier
resolution and the full package document for the generic documentation
fallback. Both raise LibDocsError(REGISTRY_LOOKUP_FAILED) on any failure so
callers have a single exception type to degrade on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import quote

from pydantic import ValidationError

from libdocs.errors import ErrorCode, LibDocsError
from libdocs.models.package import PackageMetadata

if TYPE_CHECKING:
    from libdocs.config import RegistrySettings
    from libdocs.fetcher import Fetcher


def _lookup_failed(name: str, reason: str, *, recoverable: bool = False) -> LibDocsError:
    return LibDocsError(
        code=ErrorCode.REGISTRY_LOOKUP_FAILED,
        message=f"Package registry lookup failed for '{name}': {reason}",
        suggestion="Check the package name, or try again later.",
        recoverable=recoverable,
    )


class PackageRegistry:
    def __init__(self, fetcher: Fetcher, settings: RegistrySettings) -> None:
        self._fetcher = fetcher
        self._settings = settings

    def _package_url(self, name: str) -> str:
        # Scoped names keep their "@" but encode the slash: @types%2Fnode
        return f"{self._settings.url.rstrip('/')}/{quote(name, safe='@')}"

    def package_page_url(self, name: str) -> str:
        return f"{self._settings.package_page_url.rstrip('/')}/{name}"

    async def latest_version(self, name: str) -> str:
        url = f"{self._package_url(name)}/latest"
        try:
            payload = await self._fetcher.fetch_json(url)
        except LibDocsError as exc:
            raise _lookup_failed(name, exc.message, recoverable=exc.recoverable) from exc

        version = payload.get("version") if isinstance(payload, dict) else None
        if not isinstance(version, str) or not version:
            raise _lookup_failed(name, "response has no version")
        return version

    async def metadata(self, name: str) -> PackageMetadata:
        url = self._package_url(name)
        try:
            payload = await self._fetcher.fetch_json(url)
        except LibDocsError as exc:
            raise _lookup_failed(name, exc.message, recoverable=exc.recoverable) from exc

        if isinstance(payload, dict):
            payload = {"name": name, **payload}
        try:
            return PackageMetadata.model_validate(payload)
        except ValidationError as exc:
            raise _lookup_failed(name, "malformed package document") from exc
