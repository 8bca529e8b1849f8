"""Tests for URL and short code validation."""

import pytest

from shortener.core.exceptions import ValidationError
from shortener.core.validators import (
    is_valid_url,
    sanitize_short_code,
    validate_custom_code,
    validate_url,
)


class TestURLValidation:
    """Test URL validation function."""

    def test_valid_urls(self):
        valid_urls = [
            "http://example.com",
            "https://example.com",
            "https://www.example.com/path/to/page",
            "http://subdomain.example.com:8080/path?query=value",
            "https://example.com/path?q=1",
            "http://localhost:3000/dashboard",
            "http://127.0.0.1/health",
            "https://en.wikipedia.org/wiki/File:Example.jpg",
            "https://example.com/profile:1",
            "https://example.com/metadata:x",
        ]
        for url in valid_urls:
            assert is_valid_url(url), f"Should be valid: {url}"

    def test_invalid_urls(self):
        invalid_urls = [
            "not-a-url",
            "ftp://example.com",  # FTP not supported
            "example.com",  # Missing scheme
            "",
            "http://",  # Missing domain
            "javascript:alert(1)",
            "data:text/html,hello",
            "file:///etc/passwd",
            "https://example.com/a b",
            "http://example.com:notaport/",
            None,
        ]
        for url in invalid_urls:
            assert not is_valid_url(url), f"Should be invalid: {url}"

    def test_length_limit(self):
        url = "https://example.com/" + "a" * 2048
        assert not is_valid_url(url)
        assert is_valid_url(url, max_length=4096)

    def test_validate_url_strips_surrounding_whitespace(self):
        assert validate_url("  https://example.com/x  ") == "https://example.com/x"

    def test_validate_url_reports_url_field(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_url("example.com")
        assert exc_info.value.field == "url"


class TestCustomCodeValidation:

    @pytest.mark.parametrize("code", ["abc123", "my-link", "under_score", "A", "x" * 255])
    def test_accepts_allowed_codes(self, code):
        assert validate_custom_code(code) == code

    @pytest.mark.parametrize("code", [
        "",
        "has space",
        "slash/code",
        "dot.code",
        "emoji☃",
        "trailing\n",
        "x" * 256,
    ])
    def test_rejects_bad_codes(self, code):
        with pytest.raises(ValidationError) as exc_info:
            validate_custom_code(code)
        assert exc_info.value.field == "customCode"

    def test_sanitize_short_code(self):
        assert sanitize_short_code("abc-1_2") == "abc-1_2"
        assert sanitize_short_code(" abc") is None
        assert sanitize_short_code("abc ") is None
        assert sanitize_short_code("../etc") is None
        assert sanitize_short_code("") is None
        assert sanitize_short_code("a" * 256) is None
