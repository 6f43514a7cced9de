"""Documentation providers.

A provider turns a canonical library id (plus optional topic) into raw
documentation text. There are two variants:

- DedicatedProvider: a fixed documentation site, per-topic URL overrides and
  a content extractor. Fetch errors propagate to the caller.
- GenericProvider: the fallback chain for every other library
  (registry metadata → repository README → repository page → not found).
  Never raises.

ProviderRegistry maps library names to providers; names without a dedicated
provider get the generic fallback.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

import structlog

from libdocs.errors import LibDocsError
from libdocs.extract import ContentExtractor
from libdocs.models.outcome import Degraded, DegradedReason, DocsOutcome, Ok

if TYPE_CHECKING:
    from collections.abc import Mapping

    from libdocs.models.library import CanonicalLibraryId
    from libdocs.package_registry import PackageRegistry
    from libdocs.protocols import FetcherProtocol

log = structlog.get_logger()

NO_DESCRIPTION = "No description available."
README_EXTRACTOR = ContentExtractor("#readme")

_GITHUB_SHORTHAND_RE = re.compile(r"^[\w.-]+/[\w.-]+$")


@dataclass(frozen=True)
class FetchContext:
    """Outbound capabilities handed to providers."""

    fetcher: FetcherProtocol
    registry: PackageRegistry
    readme_branch: str = "master"


class Provider(Protocol):
    async def fetch(
        self,
        library: CanonicalLibraryId,
        topic: str | None,
        ctx: FetchContext,
    ) -> DocsOutcome: ...


def format_document(title: str, version: str, body: str, source: str) -> str:
    return f"# {title} Documentation (v{version})\n\n{body}\n\nSource: {source}"


@dataclass(frozen=True)
class DedicatedProvider:
    title: str
    base_url: str
    extractor: ContentExtractor
    # Keys are matched case-insensitively
    topic_urls: Mapping[str, str] = field(default_factory=dict)

    def url_for(self, topic: str | None) -> str:
        if not topic:
            return self.base_url
        wanted = topic.lower()
        for key, url in self.topic_urls.items():
            if key.lower() == wanted:
                return url
        return self.base_url

    async def fetch(
        self,
        library: CanonicalLibraryId,
        topic: str | None,
        ctx: FetchContext,
    ) -> DocsOutcome:
        url = self.url_for(topic)
        html = await ctx.fetcher.fetch(url)
        text = self.extractor(html)
        log.info("provider_fetch_complete", provider=self.title, url=url, text_length=len(text))
        return Ok(format_document(self.title, library.version, text.strip(), url))


def normalise_repo_url(url: str) -> str:
    """Turn an npm ``repository.url`` into a browsable https URL.

    ``git+https://github.com/o/r.git`` → ``https://github.com/o/r``
    ``git://github.com/o/r.git``       → ``https://github.com/o/r``
    ``git@github.com:o/r.git``         → ``https://github.com/o/r``
    ``github:o/r`` and ``o/r``         → ``https://github.com/o/r``
    """
    url = url.strip().removeprefix("git+")

    if url.startswith("git@"):
        host, _, path = url.removeprefix("git@").partition(":")
        url = f"https://{host}/{path}"
    elif url.startswith("ssh://git@"):
        url = "https://" + url.removeprefix("ssh://git@")
    elif url.startswith("git:"):
        url = "https:" + url.removeprefix("git:")
    elif url.startswith("github:"):
        url = "https://github.com/" + url.removeprefix("github:")
    elif _GITHUB_SHORTHAND_RE.match(url):
        url = "https://github.com/" + url

    return url.rstrip("/").removesuffix(".git")


class GenericProvider:
    """Fallback chain for libraries without a dedicated provider.

    ``topic`` is accepted for interface symmetry; there is no topic routing
    for generic libraries.
    """

    async def fetch(
        self,
        library: CanonicalLibraryId,
        topic: str | None,
        ctx: FetchContext,
    ) -> DocsOutcome:
        name, version = library.name, library.version
        bound = log.bind(provider="generic", library_id=str(library))

        try:
            metadata = await ctx.registry.metadata(name)
        except LibDocsError as exc:
            bound.info("generic_metadata_failed", message=exc.message)
            return Degraded(DegradedReason.NOT_FOUND, str(library), detail=exc.message)

        if metadata.repository_url is None:
            bound.info("generic_using_description")
            body = (
                f"{metadata.description or NO_DESCRIPTION}\n\n"
                f"## Installation\n\n```\nnpm install {name}\n```"
            )
            return Ok(format_document(name, version, body, ctx.registry.package_page_url(name)))

        repo_url = normalise_repo_url(metadata.repository_url)
        readme_url = f"{repo_url}/raw/{ctx.readme_branch}/README.md"

        try:
            readme = await ctx.fetcher.fetch(readme_url)
        except LibDocsError as exc:
            bound.info("generic_readme_failed", url=readme_url, message=exc.message)
        else:
            bound.info("generic_readme_fetched", url=readme_url)
            return Ok(format_document(name, version, readme, repo_url))

        try:
            html = await ctx.fetcher.fetch(repo_url)
        except LibDocsError as exc:
            bound.info("generic_repo_page_failed", url=repo_url, message=exc.message)
            return Degraded(DegradedReason.NOT_FOUND, str(library), detail=exc.message)

        bound.info("generic_repo_page_fetched", url=repo_url)
        return Ok(format_document(name, version, README_EXTRACTOR(html).strip(), repo_url))


class ProviderRegistry:
    """Library name → provider. Unknown names route to the fallback."""

    def __init__(
        self,
        providers: Mapping[str, Provider] | None = None,
        fallback: Provider | None = None,
    ) -> None:
        self._providers: dict[str, Provider] = dict(providers or {})
        self._fallback: Provider = fallback if fallback is not None else GenericProvider()

    def register(self, name: str, provider: Provider) -> None:
        self._providers[name] = provider

    def get(self, name: str) -> Provider:
        return self._providers.get(name, self._fallback)

    def names(self) -> frozenset[str]:
        return frozenset(self._providers)

    def __contains__(self, name: object) -> bool:
        return name in self._providers


DEDICATED_PROVIDERS: Mapping[str, DedicatedProvider] = {
    "react": DedicatedProvider(
        title="React",
        base_url="https://react.dev/reference/react",
        extractor=ContentExtractor("main"),
        topic_urls={
            "hooks": "https://react.dev/reference/react/hooks",
            "components": "https://react.dev/reference/react/components",
            "suspense": "https://react.dev/reference/react/Suspense",
        },
    ),
    "nextjs": DedicatedProvider(
        title="Next.js",
        base_url="https://nextjs.org/docs",
        extractor=ContentExtractor("main"),
        topic_urls={
            "routing": "https://nextjs.org/docs/app/building-your-application/routing",
            "data-fetching": "https://nextjs.org/docs/app/building-your-application/data-fetching",
            "api": "https://nextjs.org/docs/app/building-your-application/routing/route-handlers",
        },
    ),
    "vue": DedicatedProvider(
        title="Vue.js",
        base_url="https://vuejs.org/guide/introduction.html",
        extractor=ContentExtractor(".content"),
        topic_urls={
            "composition": "https://vuejs.org/guide/extras/composition-api-faq.html",
            "components": "https://vuejs.org/guide/essentials/component-basics.html",
            "reactivity": "https://vuejs.org/guide/essentials/reactivity-fundamentals.html",
        },
    ),
    "express": DedicatedProvider(
        title="Express.js",
        base_url="https://expressjs.com/en/4x/api.html",
        extractor=ContentExtractor("#page-doc"),
        topic_urls={
            "routing": "https://expressjs.com/en/guide/routing.html",
            "middleware": "https://expressjs.com/en/guide/using-middleware.html",
            "error": "https://expressjs.com/en/guide/error-handling.html",
        },
    ),
    "node": DedicatedProvider(
        title="Node.js",
        base_url="https://nodejs.org/docs/latest/api/",
        extractor=ContentExtractor("#apicontent"),
        topic_urls={
            "fs": "https://nodejs.org/docs/latest/api/fs.html",
            "http": "https://nodejs.org/docs/latest/api/http.html",
            "buffer": "https://nodejs.org/docs/latest/api/buffer.html",
        },
    ),
    "typescript": DedicatedProvider(
        title="TypeScript",
        base_url="https://www.typescriptlang.org/docs/",
        extractor=ContentExtractor(".main-content"),
        topic_urls={
            "interfaces": "https://www.typescriptlang.org/docs/handbook/interfaces.html",
            "generics": "https://www.typescriptlang.org/docs/handbook/generics.html",
            "types": "https://www.typescriptlang.org/docs/handbook/basic-types.html",
        },
    ),
    "tailwindcss": DedicatedProvider(
        title="Tailwind CSS",
        base_url="https://tailwindcss.com/docs",
        extractor=ContentExtractor(".prose"),
        topic_urls={
            "colors": "https://tailwindcss.com/docs/customizing-colors",
            "flex": "https://tailwindcss.com/docs/flex",
            "grid": "https://tailwindcss.com/docs/grid-template-columns",
        },
    ),
}


def build_default_registry() -> ProviderRegistry:
    return ProviderRegistry(DEDICATED_PROVIDERS)
