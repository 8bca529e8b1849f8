"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: backend-specific engine configuration
- UrlMappingStore: the store contract used by the allocator and resolver
- Session management: Database session creation and management
"""

from shortener.db.interface import DatabaseAdapter
from shortener.db.session import get_session, async_session_maker, engine
from shortener.db.store import UrlMappingStore

__all__ = [
    "DatabaseAdapter",
    "UrlMappingStore",
    "get_session",
    "async_session_maker",
    "engine",
]
