"""
Custom Exceptions

This module defines the error taxonomy of the shortener core.
Every failure the allocator, resolver or store can produce is one of
these types, and the API layer maps each of them to a typed response:

- ValidationError       -> 400, field-level message
- ConflictError         -> 409, user-facing message
- ExhaustedError        -> 500, generic message (logged for operators)
- NotFoundError         -> 404
- StoreUnavailableError -> 503, "try again" message
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    pass


class ValidationError(URLShortenerException):
    """Raised when a URL or short code fails format validation."""

    def __init__(self, field: str, message: str, value: Optional[str] = None):
        self.field = field
        self.message = message
        self.value = value
        super().__init__(message)


class ConflictError(URLShortenerException):
    """Raised when a short code is already in use."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' is already in use")


class ExhaustedError(URLShortenerException):
    """Raised when code generation collided on every attempt."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a unique short code after {attempts} attempts"
        )


class NotFoundError(URLShortenerException):
    """Raised when a short code is not found in the database."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class StoreUnavailableError(URLShortenerException):
    """Raised when the store times out or cannot be reached."""

    def __init__(self, operation: str, original_error: Optional[Exception] = None):
        self.operation = operation
        self.original_error = original_error
        super().__init__(f"Store unavailable during '{operation}'")
