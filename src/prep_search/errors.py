"""
Error types surfaced by the search core and the HTTP layer.
"""

from __future__ import annotations

from typing import Any


class SearchError(Exception):
    """Base error carrying the HTTP status and error code it maps to."""

    status_code = 500
    code = "APP_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EmbeddingUnavailable(SearchError):
    """The embedding provider produced no vector for the search query."""

    status_code = 502
    code = "EMBEDDING_UNAVAILABLE"


class InvalidSearchRequest(SearchError):
    status_code = 400
    code = "VALIDATION_ERROR"


class ProblemNotFound(SearchError):
    status_code = 404
    code = "NOT_FOUND"


class CatalogueUnavailable(SearchError):
    """No problem database exists at the configured path."""

    status_code = 503
    code = "CATALOGUE_UNAVAILABLE"


def error_response(error: BaseException) -> dict[str, Any]:
    """Render an exception into the API error envelope."""
    if isinstance(error, SearchError):
        return {"error": {"code": error.code, "message": error.message}}
    if isinstance(error, Exception):
        return {"error": {"code": "INTERNAL_ERROR", "message": str(error)}}
    return {
        "error": {"code": "UNKNOWN_ERROR", "message": "An unknown error occurred"}
    }
