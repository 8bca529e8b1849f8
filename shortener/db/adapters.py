"""
Database Adapters

This module implements the DatabaseAdapter interface for SQLite and PostgreSQL.
All backend-specific configuration and behavior is encapsulated here.

SQLite is a file-based database that's perfect for:
- Local development
- Testing
- Single-instance deployments

PostgreSQL is the production choice when several service instances share
one database.
"""

from typing import Any

from sqlalchemy.pool import NullPool

from shortener.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    SQLite allows a single writer at a time; concurrent writers wait on the
    file lock for up to connect_timeout seconds before failing.
    """

    def get_pool_class(self) -> type[NullPool]:
        """
        SQLite uses NullPool: a file-based database doesn't benefit from
        connection pooling, and every session gets its own connection.
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False,
            # Busy timeout: how long a writer waits for the file lock
            "timeout": self.connect_timeout,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }


class PostgreSQLAdapter(DatabaseAdapter):
    """
    PostgreSQL adapter (asyncpg driver).

    Uses SQLAlchemy's default queue pool with pre-ping so dropped
    connections are detected before a request uses them.
    """

    def get_pool_class(self) -> None:
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "timeout": self.connect_timeout,
            "command_timeout": self.connect_timeout,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
            "pool_timeout": self.connect_timeout,
        }


def get_database_adapter(database_url: str, connect_timeout: float = 5.0) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Args:
        database_url: SQLAlchemy URL (sqlite+aiosqlite://... or postgresql+asyncpg://...)
        connect_timeout: Seconds a connection attempt may take

    Returns:
        DatabaseAdapter instance

    Raises:
        ValueError: If the URL names an unsupported backend
    """
    if database_url.startswith("sqlite"):
        return SQLiteAdapter(connect_timeout=connect_timeout)
    if database_url.startswith("postgresql"):
        return PostgreSQLAdapter(connect_timeout=connect_timeout)
    raise ValueError(f"Unsupported database backend: {database_url.split(':', 1)[0]}")
