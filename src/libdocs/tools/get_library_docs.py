"""Tool handler for get-library-docs.

Validates input and hands off to DocsService, which owns the cache lookup,
provider dispatch and token budgeting. Fetch failures come back as
placeholder text, so the only error raised here is INVALID_INPUT.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from libdocs.errors import ErrorCode, LibDocsError
from libdocs.models.tools import GetLibraryDocsInput, GetLibraryDocsOutput

if TYPE_CHECKING:
    from libdocs.state import AppState


async def handle(
    library_id: str | None,
    state: AppState,
    topic: str | None = None,
    tokens: int | None = None,
) -> dict:
    """Handle a get-library-docs tool call."""
    log = structlog.get_logger().bind(tool="get-library-docs", library_id=library_id)
    log.info("handler_called", topic=topic, tokens=tokens)

    if tokens is None:
        tokens = state.settings.docs.default_tokens

    # Validate input
    try:
        validated = GetLibraryDocsInput(library_id=library_id, topic=topic, tokens=tokens)
    except ValueError as exc:
        raise LibDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=f"Invalid get-library-docs arguments: {exc}",
            suggestion="Call resolve-library-id first and pass the returned 'name@version' id.",
            recoverable=False,
        ) from exc

    docs = await state.docs.get_or_fetch(validated.library_id, validated.topic, validated.tokens)
    log.info("docs_returned", docs_length=len(docs))

    output = GetLibraryDocsOutput(docs=docs)
    return output.model_dump()
