"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.
These functions help prevent security issues and ensure data integrity.

Security Considerations:
- Input validation prevents injection attacks
- Only http(s) targets are accepted, dangerous schemes are rejected
- Length limits prevent DoS attacks
"""

import re
from typing import Optional
from urllib.parse import urlparse

from shortener.core.exceptions import ValidationError

SHORT_CODE_PATTERN = re.compile(r'[A-Za-z0-9_-]+')
SHORT_CODE_MAX_LENGTH = 255
MAX_URL_LENGTH = 2048

ALLOWED_SCHEMES = {'http', 'https'}


def is_valid_url(url: str, max_length: int = MAX_URL_LENGTH) -> bool:
    """
    Validate URL format and security.

    Checks that URL uses http/https and has a host. The scheme allow-list
    rejects javascript:, data:, file: and other dangerous schemes.

    Args:
        url: The URL string to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)

    Returns:
        True if valid and safe, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    if len(url) > max_length:
        return False

    if any(ch.isspace() for ch in url):
        return False

    try:
        result = urlparse(url)
        # Accessing .port raises ValueError on a malformed port
        result.port
    except ValueError:
        return False

    if not result.scheme or not result.netloc:
        return False

    if result.scheme.lower() not in ALLOWED_SCHEMES:
        return False

    host = result.hostname
    if not host:
        return False
    if host != 'localhost' and '.' not in host and ':' not in host:
        return False

    return True


def validate_url(url: Optional[str], max_length: int = MAX_URL_LENGTH) -> str:
    """
    Return the trimmed URL or raise ValidationError for the 'url' field.
    """
    candidate = url.strip() if isinstance(url, str) else url
    if not is_valid_url(candidate, max_length=max_length):
        raise ValidationError(
            field="url",
            message="Please enter a valid URL",
            value=url,
        )
    return candidate


def validate_custom_code(code: str, max_length: int = SHORT_CODE_MAX_LENGTH) -> str:
    """
    Validate a user supplied short code.

    Args:
        code: The requested short code (already trimmed by the caller)
        max_length: Maximum allowed length (default: 255)

    Returns:
        The code unchanged when valid

    Raises:
        ValidationError: If the code is empty, too long, or uses characters
            outside [A-Za-z0-9_-]
    """
    if not isinstance(code, str) or not code:
        raise ValidationError(
            field="customCode",
            message="Custom code must not be empty",
            value=code,
        )

    if len(code) > max_length:
        raise ValidationError(
            field="customCode",
            message=f"Custom code must be at most {max_length} characters",
            value=code,
        )

    if not SHORT_CODE_PATTERN.fullmatch(code):
        raise ValidationError(
            field="customCode",
            message="Custom code must be alphanumeric, underscore or hyphen",
            value=code,
        )

    return code


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Sanitize and validate an inbound short code (e.g. from a redirect path).

    Returns:
        The short code if valid, None otherwise
    """
    if not short_code or not isinstance(short_code, str):
        return None

    if len(short_code) > SHORT_CODE_MAX_LENGTH:
        return None

    if not SHORT_CODE_PATTERN.fullmatch(short_code):
        return None

    return short_code
