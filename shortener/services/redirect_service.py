"""
Redirect Service

This service handles URL redirection logic: it maps an inbound short code
to its original URL and records the visit.

Design Decisions:
- Lookup and click increment go through the store; the increment is one
  atomic UPDATE so concurrent hits on the same code are never lost
- The increment and the redirect response are not one transaction; a
  redirect only counts once its increment has been committed
"""

import logging

from shortener.core.exceptions import NotFoundError
from shortener.core.validators import sanitize_short_code
from shortener.db.store import UrlMappingStore

logger = logging.getLogger(__name__)


class RedirectResolver:
    """Resolves short codes to original URLs and counts clicks."""

    def __init__(self, store: UrlMappingStore):
        self.store = store

    async def resolve(self, short_code: str) -> str:
        """
        Get the original URL for a short code and record one click.

        Raises:
            NotFoundError: If the code is malformed or unknown (store untouched)
            StoreUnavailableError: If the store timed out or is unreachable
        """
        code = sanitize_short_code(short_code)
        if code is None:
            raise NotFoundError(short_code)

        mapping = await self.store.find_by_code(code)
        if mapping is None:
            raise NotFoundError(code)

        if not await self.store.increment_clicks(code):
            # Mappings are never deleted, so this only happens if the row
            # vanished underneath us (e.g. manual cleanup)
            raise NotFoundError(code)

        logger.debug(f"Resolved '{code}' -> {mapping.original_url}")
        return mapping.original_url
