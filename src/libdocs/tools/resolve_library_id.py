"""Tool handler for resolve-library-id.

Receives AppState, delegates to the resolver module, and returns a
structured dict. No MCP or transport imports; server.py and rpc.py handle
the wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from libdocs.errors import ErrorCode, LibDocsError
from libdocs.models.tools import ResolveLibraryIdInput, ResolveLibraryIdOutput
from libdocs.resolver import resolve_library_id

if TYPE_CHECKING:
    from libdocs.state import AppState


async def handle(library_name: str | None, state: AppState) -> dict:
    """Handle a resolve-library-id tool call."""
    log = structlog.get_logger().bind(tool="resolve-library-id", library_name=library_name)
    log.info("handler_called")

    # Validate input
    try:
        validated = ResolveLibraryIdInput(library_name=library_name)
    except ValueError as exc:
        raise LibDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=f"libraryName is required: {exc}",
            suggestion="Provide a non-empty library name, e.g. 'react' or 'lodash'.",
            recoverable=False,
        ) from exc

    library_id = await resolve_library_id(validated.library_name, state.aliases, state.registry)
    log.info("resolve_complete", library_id=str(library_id))

    output = ResolveLibraryIdOutput(library_id=str(library_id))
    return output.model_dump(by_alias=True)
