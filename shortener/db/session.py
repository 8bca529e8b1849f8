"""
Database Session Management with Connection Pooling

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: SQLite or PostgreSQL selected from DATABASE_URL
- Connection pooling: Configured per database type
- Async session management: One session per request
- Error handling: Automatic rollback on exceptions
"""

from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortener.core.setting import settings
from shortener.db.adapters import get_database_adapter
from shortener.db import models  # noqa: F401  (registers tables on SQLModel.metadata)

db_adapter = get_database_adapter(
    settings.DATABASE_URL,
    connect_timeout=settings.STORE_TIMEOUT_SECONDS,
)

engine = db_adapter.create_engine(settings.DATABASE_URL)


def make_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """Build a session factory with the settings every session in the service uses."""
    return async_sessionmaker(
        bind,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
        autoflush=False,
    )


async_session_maker = make_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    This function:
    - Creates a new async session
    - Yields it to the endpoint
    - Commits on success, rolls back on exception
    - Closes session automatically (context manager handles it)
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_db_and_tables(bind: AsyncEngine = engine) -> None:
    """Create all tables that don't exist yet (development and tests)."""
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def check_database(session: AsyncSession) -> bool:
    """Return True if the database answers a trivial query."""
    await session.execute(text("SELECT 1"))
    return True
