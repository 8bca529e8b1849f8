"""
Rate Limiting Configuration

This module provides rate limiting functionality for API endpoints.
Rate limiting prevents abuse and ensures fair usage.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Different limits for different endpoints, configured via settings
- IP-based limiting (can be extended to user-based)
- Can be switched off entirely with RATE_LIMIT_ENABLED=false
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from shortener.core.setting import settings

# Initialize rate limiter
# Uses IP address for rate limiting
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Rate limit configurations per endpoint
# Format: "count/period" (e.g., "10/minute" means 10 requests per minute)
RATE_LIMITS = {
    "shorten": settings.RATE_LIMIT_SHORTEN,
    "redirect": settings.RATE_LIMIT_REDIRECT,
    "stats": settings.RATE_LIMIT_STATS,
}
