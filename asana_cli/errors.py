#!/usr/bin/env python3
"""
Asana CLI Exception Classes

Custom exception hierarchy for configuration, transport, API and decode errors.
Every error raised by the client is an AsanaError, so the CLI boundary only
needs to catch one type.
"""

from typing import Optional


class AsanaError(Exception):
    """Base exception for Asana CLI errors"""

    pass


class AsanaConfigError(AsanaError):
    """Raised when configuration is missing or invalid"""

    pass


class AsanaTransportError(AsanaError):
    """Raised when the HTTP exchange itself fails (connection, DNS, TLS)"""

    pass


class AsanaDecodeError(AsanaError):
    """Raised when a success response cannot be decoded"""

    pass


class AsanaFileError(AsanaError):
    """Raised when a local file cannot be read or written"""

    pass


class AsanaAPIError(AsanaError):
    """Raised when the Asana API returns a status code >= 400"""

    def __init__(self, message: str, status_code: Optional[int] = None, help: Optional[str] = None):
        self.status_code = status_code
        self.help = help
        super().__init__(message)


class AsanaValidationError(AsanaAPIError):
    """Raised when request parameters are invalid (400)"""

    pass


class AsanaAuthError(AsanaAPIError):
    """Raised when authentication or authorization fails (401, 403)"""

    pass


class AsanaNotFoundError(AsanaAPIError):
    """Raised when resource is not found (404)"""

    pass


class AsanaRateLimitError(AsanaAPIError):
    """Raised when rate limit is exceeded (429)"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = 429,
        help: Optional[str] = None,
        retry_after: Optional[int] = None,
    ):
        super().__init__(message, status_code, help)
        self.retry_after = retry_after


class AsanaServerError(AsanaAPIError):
    """Raised when server returns 5xx error"""

    pass


def api_error_class(status_code: int) -> type:
    """Pick the AsanaAPIError subclass for an HTTP status code."""
    if status_code == 400:
        return AsanaValidationError
    if status_code in (401, 403):
        return AsanaAuthError
    if status_code == 404:
        return AsanaNotFoundError
    if status_code == 429:
        return AsanaRateLimitError
    if status_code >= 500:
        return AsanaServerError
    return AsanaAPIError
