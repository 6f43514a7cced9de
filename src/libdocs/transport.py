"""HTTP transport: JSON-RPC endpoint, health check and security middleware."""

from __future__ import annotations

import re
import secrets
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
import uvicorn
from starlette.applications import Starlette
from starlette.datastructures import Headers
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from libdocs.rpc import PARSE_ERROR, dispatch, error_response
from libdocs.state import open_app_state

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request
    from starlette.types import ASGIApp, Receive, Scope, Send

    from libdocs.config import Settings
    from libdocs.state import AppState

log = structlog.get_logger()

_LOCALHOST_ORIGIN = re.compile(r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$")


class SecurityMiddleware:
    """Pure ASGI middleware for HTTP transport security.

    Enforces two checks on every HTTP request:
    1. Optional bearer key authentication.
    2. Origin validation (localhost only) to prevent DNS rebinding.

    The health check is exempt from authentication so that process
    supervisors can poll it without credentials.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        auth_enabled: bool,
        auth_key: str | None = None,
    ) -> None:
        self.app = app
        self.auth_enabled = auth_enabled
        self.auth_key = auth_key

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            headers = Headers(scope=scope)

            # 1. Optional bearer key authentication
            if self.auth_enabled and scope.get("path") != "/health":
                auth_header = headers.get("authorization", "")
                if not auth_header.startswith("Bearer ") or auth_header[7:] != self.auth_key:
                    await Response("Unauthorized", status_code=401)(scope, receive, send)
                    return

            # 2. Origin validation (localhost only)
            origin = headers.get("origin", "")
            if origin and not _LOCALHOST_ORIGIN.match(origin):
                await Response("Forbidden", status_code=403)(scope, receive, send)
                return

        await self.app(scope, receive, send)


async def _rpc_endpoint(request: Request) -> JSONResponse:
    try:
        message = await request.json()
    except ValueError:
        return JSONResponse(error_response(None, PARSE_ERROR, "Parse error"))

    log.info("rpc_request", method=message.get("method") if isinstance(message, dict) else None)
    response = await dispatch(message, request.app.state.libdocs)
    return JSONResponse(response)


async def _health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def build_http_app(settings: Settings, *, state: AppState | None = None) -> Starlette:
    """Build the Starlette app.

    When ``state`` is given it is used as-is and the app does not manage its
    lifecycle; otherwise the app opens and closes its own AppState.
    """

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        if state is not None:
            yield
            return
        async with open_app_state(settings) as app_state:
            app.state.libdocs = app_state
            yield

    app = Starlette(
        routes=[
            Route("/", _rpc_endpoint, methods=["POST"]),
            Route("/health", _health, methods=["GET"]),
        ],
        lifespan=lifespan,
    )
    if state is not None:
        app.state.libdocs = state
    return app


def run_http_server(settings: Settings) -> None:
    """Serve the JSON-RPC endpoint over HTTP."""
    http_log = log.bind(transport="http")

    auth_key: str | None = settings.server.auth_key or None

    if settings.server.auth_enabled and not auth_key:
        auth_key = secrets.token_urlsafe(32)
        http_log.warning("http_auth_key_auto_generated", auth_key=auth_key)

    if not settings.server.auth_enabled:
        http_log.warning("http_auth_disabled")

    secured_app = SecurityMiddleware(
        build_http_app(settings),
        auth_enabled=settings.server.auth_enabled,
        auth_key=auth_key,
    )

    http_log.info("http_server_starting", host=settings.server.host, port=settings.server.port)
    uvicorn.run(
        secured_app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # Disable uvicorn's default logging; structlog handles it
    )
