from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_INPUT = "INVALID_INPUT"
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"
    PAGE_FETCH_FAILED = "PAGE_FETCH_FAILED"
    URL_NOT_ALLOWED = "URL_NOT_ALLOWED"
    REGISTRY_LOOKUP_FAILED = "REGISTRY_LOOKUP_FAILED"


class LibDocsError(Exception):
    """Raised for all expected failure conditions.

    Only ``INVALID_INPUT`` is meant to reach tool callers. Fetch and registry
    failures are raised by the fetcher and package registry client and are
    converted into degraded text results by the providers and DocsService.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
