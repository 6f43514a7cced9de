"""HTTP fetcher shared by providers and the package registry client.

All outbound network I/O goes through a single Fetcher instance. The Fetcher
receives an httpx.AsyncClient via constructor injection; the application
state owns the client lifecycle.
"""

from __future__ import annotations

import ipaddress
import json
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin, urlparse

import httpx
import structlog

from libdocs.errors import ErrorCode, LibDocsError

if TYPE_CHECKING:
    from libdocs.config import FetcherSettings

log = structlog.get_logger()

PRIVATE_NETWORKS: list[ipaddress.IPv4Network | ipaddress.IPv6Network] = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
]


def build_http_client(settings: FetcherSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=False,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": settings.user_agent},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


def is_url_allowed(url: str, *, check_private_ips: bool = True) -> bool:
    """Reject non-HTTP schemes and, optionally, private IP literals."""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return False
    if not check_private_ips:
        return True

    try:
        addr = ipaddress.ip_address(parsed.hostname)
    except ValueError:
        return True  # hostname is a domain name, not an IP
    return not any(addr in net for net in PRIVATE_NETWORKS)


class Fetcher:
    """HTTP GET with per-hop redirect validation. Never retries."""

    def __init__(self, client: httpx.AsyncClient, settings: FetcherSettings) -> None:
        self._client = client
        self._settings = settings

    async def fetch(self, url: str) -> str:
        """Fetch a URL and return the response body as text.

        Raises LibDocsError on blocked URLs, network errors, timeouts, and
        non-2xx responses.
        """
        current_url = url
        max_redirects = self._settings.max_redirects
        hops = 0

        try:
            while True:
                if not is_url_allowed(
                    current_url, check_private_ips=self._settings.ssrf_private_ip_check
                ):
                    log.warning("ssrf_blocked", url=current_url)
                    raise LibDocsError(
                        code=ErrorCode.URL_NOT_ALLOWED,
                        message=f"URL not allowed: {current_url}",
                        suggestion="Only public http(s) documentation URLs can be fetched.",
                        recoverable=False,
                    )

                response = await self._client.get(current_url)

                if response.is_redirect and "location" in response.headers:
                    if hops == max_redirects:
                        raise LibDocsError(
                            code=ErrorCode.PAGE_FETCH_FAILED,
                            message=f"Too many redirects fetching {url}",
                            suggestion="The documentation URL has an unusually long redirect chain.",
                            recoverable=False,
                        )
                    hops += 1
                    current_url = urljoin(current_url, response.headers["location"])
                    continue

                if not response.is_success:
                    if response.status_code == 404:
                        raise LibDocsError(
                            code=ErrorCode.PAGE_NOT_FOUND,
                            message=f"HTTP 404 fetching {url}",
                            suggestion="The documentation page does not exist at this URL.",
                            recoverable=False,
                        )
                    raise LibDocsError(
                        code=ErrorCode.PAGE_FETCH_FAILED,
                        message=f"HTTP {response.status_code} fetching {url}",
                        suggestion="The documentation source may be temporarily unavailable.",
                        recoverable=True,
                    )

                log.debug(
                    "fetch_complete",
                    url=url,
                    status_code=response.status_code,
                    content_length=len(response.text),
                )
                return response.text

        except LibDocsError:
            raise
        except httpx.HTTPError as exc:
            raise LibDocsError(
                code=ErrorCode.PAGE_FETCH_FAILED,
                message=f"Network error fetching {url}: {exc!r}",
                suggestion="The documentation source may be temporarily unavailable.",
                recoverable=True,
            ) from exc

    async def fetch_json(self, url: str) -> Any:
        """Fetch a URL and decode the body as JSON."""
        body = await self.fetch(url)
        try:
            return json.loads(body)
        except ValueError as exc:
            raise LibDocsError(
                code=ErrorCode.PAGE_FETCH_FAILED,
                message=f"Malformed JSON from {url}",
                suggestion="The upstream service returned an unexpected response.",
                recoverable=True,
            ) from exc
