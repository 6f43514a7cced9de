"""JSON-RPC envelope for the HTTP transport.

Maps a method name to a tool handler and translates failures into JSON-RPC
error objects:

  -32700  body is not valid JSON (raised by the transport)
  -32600  malformed request envelope (including a missing "jsonrpc": "2.0")
  -32601  unknown method
  -32602  invalid parameters (LibDocsError INVALID_INPUT)
  -32603  internal error (anything else)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import structlog

import libdocs.tools.get_library_docs as t_get_docs
import libdocs.tools.resolve_library_id as t_resolve
from libdocs import __version__
from libdocs.errors import ErrorCode, LibDocsError

if TYPE_CHECKING:
    from libdocs.state import AppState

log = structlog.get_logger()

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

SERVER_NAME = "libdocs"

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": "resolve-library-id",
        "description": "Resolves a general library name into a canonical 'name@version' library ID.",
        "parameters": {
            "type": "object",
            "properties": {
                "libraryName": {
                    "type": "string",
                    "description": "Library name to resolve, e.g. 'react' or 'lodash'",
                },
            },
            "required": ["libraryName"],
        },
    },
    {
        "name": "get-library-docs",
        "description": "Fetches documentation for a library using a canonical library ID.",
        "parameters": {
            "type": "object",
            "properties": {
                "context7CompatibleLibraryID": {
                    "type": "string",
                    "description": "The canonical 'name@version' library ID",
                },
                "topic": {
                    "type": "string",
                    "description": 'Focus the docs on a specific topic (e.g., "routing", "hooks")',
                },
                "tokens": {
                    "type": "number",
                    "description": "Max number of tokens to return",
                },
            },
            "required": ["context7CompatibleLibraryID"],
        },
    },
]

Params = dict[str, Any]
MethodHandler = Callable[[Params, "AppState"], Awaitable[Any]]


def success_response(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


async def _initialize(params: Params, state: AppState) -> dict[str, Any]:
    log.info(
        "client_connected",
        client_name=params.get("client_name"),
        client_version=params.get("client_version"),
    )
    return {
        "server_info": {"name": SERVER_NAME, "version": __version__},
        "capabilities": {"tools": TOOL_DEFINITIONS},
    }


async def _resolve_library_id(params: Params, state: AppState) -> dict:
    return await t_resolve.handle(params.get("libraryName"), state)


async def _get_library_docs(params: Params, state: AppState) -> dict:
    library_id = params.get("context7CompatibleLibraryID", params.get("libraryId"))
    return await t_get_docs.handle(
        library_id,
        state,
        topic=params.get("topic"),
        tokens=params.get("tokens"),
    )


METHODS: dict[str, MethodHandler] = {
    "initialize": _initialize,
    "resolve-library-id": _resolve_library_id,
    "get-library-docs": _get_library_docs,
}


async def dispatch(message: Any, state: AppState) -> dict[str, Any]:
    """Handle one JSON-RPC request and return the response envelope."""
    if (
        not isinstance(message, dict)
        or message.get("jsonrpc") != JSONRPC_VERSION
        or not isinstance(message.get("method"), str)
    ):
        return error_response(None, INVALID_REQUEST, "Invalid request")

    request_id = message.get("id")
    method = message["method"]
    params = message.get("params")
    if params is None:
        params = {}

    handler = METHODS.get(method)
    if handler is None:
        log.info("rpc_method_not_found", method=method)
        return error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    if not isinstance(params, dict):
        return error_response(request_id, INVALID_PARAMS, "Invalid params: expected an object")

    try:
        result = await handler(params, state)
    except LibDocsError as exc:
        if exc.code == ErrorCode.INVALID_INPUT:
            log.info("rpc_invalid_params", method=method, message=exc.message)
            return error_response(request_id, INVALID_PARAMS, f"Invalid params: {exc.message}")
        log.warning("rpc_tool_error", method=method, code=exc.code, message=exc.message)
        return error_response(request_id, INTERNAL_ERROR, f"Internal error: {exc.message}")
    except Exception as exc:
        log.error("rpc_unexpected_error", method=method, exc_info=True)
        return error_response(request_id, INTERNAL_ERROR, f"Internal error: {exc}")

    return success_response(request_id, result)
