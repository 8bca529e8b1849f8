"""
Statistics Service

This service handles retrieving statistics for short URLs: the stored
mapping including its click counter and timestamps.
"""

from shortener.core.exceptions import NotFoundError
from shortener.core.validators import sanitize_short_code
from shortener.db.models import UrlMapping
from shortener.db.store import UrlMappingStore


class StatsService:
    """Service for retrieving URL statistics."""

    def __init__(self, store: UrlMappingStore):
        self.store = store

    async def get_stats(self, short_code: str) -> UrlMapping:
        """
        Get the mapping for a short code without counting a click.

        Raises:
            NotFoundError: If the code is malformed or unknown
            StoreUnavailableError: If the store timed out or is unreachable
        """
        code = sanitize_short_code(short_code)
        if code is None:
            raise NotFoundError(short_code)

        mapping = await self.store.find_by_code(code)
        if mapping is None:
            raise NotFoundError(code)
        return mapping
