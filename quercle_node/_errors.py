"""Exception hierarchy for the Quercle workflow node."""

from __future__ import annotations

from typing import Any


class QuercleError(Exception):
    """Base exception for all Quercle node errors."""

    pass


class ConfigurationError(QuercleError):
    """Raised when no usable API key or base URL is configured."""

    pass


class OperationError(QuercleError):
    """Raised when an item's parameters cannot be mapped to a request."""

    def __init__(self, message: str, item_index: int | None = None):
        self.item_index = item_index
        super().__init__(message)


class TransportError(QuercleError):
    """Raised when the request never produced a usable HTTP response."""

    pass


class APIError(TransportError):
    """Raised when the API returns a non-success HTTP status code."""

    def __init__(self, status_code: int, message: str, response_body: str | None = None):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(f"HTTP {status_code}: {message}")


class AuthenticationError(APIError):
    """Raised when the API rejects the key (HTTP 401/403)."""

    pass


class RateLimitError(APIError):
    """Raised when the API rate limit has been exceeded (HTTP 429)."""

    pass


class ServerError(APIError):
    """Raised when the API returns a server-side error (HTTP 5xx)."""

    pass


class ResponseFormatError(QuercleError):
    """Raised when a success response does not carry a string ``result``."""

    def __init__(self, message: str, payload: Any = None):
        self.payload = payload
        super().__init__(message)


__all__ = [
    "QuercleError",
    "ConfigurationError",
    "OperationError",
    "TransportError",
    "APIError",
    "AuthenticationError",
    "RateLimitError",
    "ServerError",
    "ResponseFormatError",
]
