"""Exceptions raised by the Monday.com API client.

Every failure of a GraphQL call surfaces as one of:
- TransportError: the HTTP exchange could not complete
- HttpError: the API answered with a non-success status
- ResponseParseError: the body is not the JSON document we expected
- RemoteGraphError: the API reported errors in the response body
"""

from __future__ import annotations

from typing import Any

_RETRYABLE_GRAPH_PHRASES = ("complexity", "rate limit")


class MondayError(Exception):
    """Base exception for Monday.com API errors.

    Attributes:
        retryable: Whether repeating the same call may succeed.
    """

    retryable: bool = False


class TransportError(MondayError):
    """Raised when the network call itself fails (connect, reset, timeout, DNS)."""

    retryable = True

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class HttpError(MondayError):
    """Raised when the API responds with a non-2xx status.

    Attributes:
        status_code: The HTTP status returned by the API.
        body: The raw response text, for diagnostics.
    """

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.retryable = status_code == 429 or 500 <= status_code < 600
        msg = f"Monday API returned HTTP {status_code}"
        if body:
            msg += f": {body[:200]}"
        super().__init__(msg)


class ResponseParseError(MondayError):
    """Raised when the response body cannot be interpreted."""


class RemoteGraphError(MondayError):
    """Raised when the GraphQL response carries an error list.

    Attributes:
        errors: The error objects reported by the API.
        data: Any partial result returned next to the errors.
    """

    def __init__(self, errors: list[dict[str, Any]], data: Any = None) -> None:
        self.errors = errors
        self.data = data
        message = "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
        ) or "Unknown GraphQL error"
        lowered = message.lower()
        self.retryable = any(phrase in lowered for phrase in _RETRYABLE_GRAPH_PHRASES)
        super().__init__(message)
