"""libdocs entrypoint.

Sets up structlog, opens the AppState for the FastMCP lifespan, registers
the two documentation tools and starts either the stdio MCP server or the
HTTP JSON-RPC server, depending on ``server.transport``.
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import libdocs.tools.get_library_docs as t_get_docs
import libdocs.tools.resolve_library_id as t_resolve
from libdocs import __version__
from libdocs.config import Settings
from libdocs.errors import LibDocsError
from libdocs.state import AppState, open_app_state
from libdocs.transport import run_http_server

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout carries the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info("server_starting", version=__version__, transport=settings.server.transport)
    async with open_app_state(settings) as state:
        log.info("server_started", version=__version__)
        yield state
    log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("libdocs", lifespan=lifespan)
# FastMCP has no version kwarg; set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: LibDocsError) -> CallToolResult:
    """Convert a LibDocsError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


@mcp.tool(name="resolve-library-id")
async def resolve_library_id(libraryName: str, ctx: Context) -> object:  # noqa: N803
    """Resolve a general library name into a canonical 'name@version' library ID."""
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_resolve.handle(libraryName, state)
    except LibDocsError as exc:
        log.warning(
            "tool_error",
            tool="resolve-library-id",
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="resolve-library-id", exc_info=True)
        raise


@mcp.tool(name="get-library-docs")
async def get_library_docs(
    context7CompatibleLibraryID: str,  # noqa: N803
    ctx: Context,
    topic: str | None = None,
    tokens: int | None = None,
) -> object:
    """Fetch documentation for a library using a canonical library ID.

    Optionally focus on a topic (e.g. "routing", "hooks") and cap the size of
    the returned text with ``tokens`` (default 5000).
    """
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_get_docs.handle(context7CompatibleLibraryID, state, topic, tokens)
    except LibDocsError as exc:
        log.warning(
            "tool_error",
            tool="get-library-docs",
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="get-library-docs", exc_info=True)
        raise


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()

    if settings.server.transport == "http":
        _setup_logging(settings)
        run_http_server(settings)
        return

    mcp.run()


if __name__ == "__main__":
    main()
