"""
Shared fixtures: every test gets its own SQLite file database under tmp_path.

Environment is set before the shortener package is imported because the
settings object is built at import time.
"""

import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["BASE_URL"] = "http://testserver"
os.environ["REDIRECT_PATH_PREFIX"] = "/r"

from typing import Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select

from shortener.db.adapters import SQLiteAdapter
from shortener.db.models import UrlMapping
from shortener.db.session import create_db_and_tables, get_session, make_session_maker
from shortener.db.store import UrlMappingStore
from shortener.main import app


@pytest_asyncio.fixture
async def engine(tmp_path):
    db_engine = SQLiteAdapter(connect_timeout=5.0).create_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'shortener_test.db'}"
    )
    await create_db_and_tables(db_engine)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return make_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as db_session:
        yield db_session


@pytest.fixture
def store(session):
    return UrlMappingStore(session, timeout=5.0)


@pytest.fixture
def fetch_mapping(session_maker):
    """Read a mapping through a fresh session (bypasses any identity map)."""

    async def _fetch(short_code: str) -> Optional[UrlMapping]:
        async with session_maker() as fresh:
            result = await fresh.execute(
                select(UrlMapping).where(UrlMapping.short_code == short_code)
            )
            return result.scalar_one_or_none()

    return _fetch


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_session():
        async with session_maker() as db_session:
            try:
                yield db_session
                await db_session.commit()
            except Exception:
                await db_session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
