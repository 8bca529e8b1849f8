"""
UrlMapping Store

Persistence contract used by the allocator and the resolver:

- create_mapping(original_url, short_code) -> UrlMapping | ConflictError
- find_by_code(short_code) -> UrlMapping | None
- increment_clicks(short_code)

Uniqueness of short_code is enforced by the unique index on the table, so a
constraint violation on insert is reported as ConflictError whatever the
application checked beforehand. Click counting is a single UPDATE
(clicks = clicks + 1) executed by the database, never a read-modify-write.

Every call is bounded by a timeout. A timeout or a connection-level
database failure surfaces as StoreUnavailableError.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.exceptions import ConflictError, StoreUnavailableError
from shortener.db.models import UrlMapping, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UrlMappingStore:
    """
    Store for UrlMapping rows backed by an async SQLAlchemy session.

    Writes are committed immediately so that a mapping (or a click) is
    durable as soon as the call returns.
    """

    def __init__(self, session: AsyncSession, timeout: float = 5.0):
        """
        Args:
            session: Async database session (one per request)
            timeout: Seconds each store call may take
        """
        self.session = session
        self.timeout = timeout

    async def _run(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Store call '{operation}' timed out after {self.timeout}s")
            await self._rollback_after_failure(operation)
            raise StoreUnavailableError(operation, original_error=e) from e
        except (OperationalError, InterfaceError, PoolTimeoutError) as e:
            logger.error(f"Store call '{operation}' failed: {e}")
            await self._rollback_after_failure(operation)
            raise StoreUnavailableError(operation, original_error=e) from e

    async def _rollback_after_failure(self, operation: str) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as e:
            logger.warning(f"Rollback after failed '{operation}' also failed: {e}")

    async def create_mapping(self, original_url: str, short_code: str) -> UrlMapping:
        """
        Insert a new mapping with clicks=0 and both timestamps set to now.

        Raises:
            ConflictError: If short_code is already taken (unique constraint)
            StoreUnavailableError: On timeout or connection failure
        """
        return await self._run(
            "create_mapping",
            self._insert(original_url, short_code)
        )

    async def _insert(self, original_url: str, short_code: str) -> UrlMapping:
        now = utcnow()
        mapping = UrlMapping(
            original_url=original_url,
            short_code=short_code,
            created_at=now,
            updated_at=now,
            clicks=0,
        )
        self.session.add(mapping)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(short_code) from e

        await self.session.refresh(mapping)
        return mapping

    async def find_by_code(self, short_code: str) -> Optional[UrlMapping]:
        """Return the mapping for short_code, or None."""
        return await self._run("find_by_code", self._select(short_code))

    async def _select(self, short_code: str) -> Optional[UrlMapping]:
        statement = select(UrlMapping).where(UrlMapping.short_code == short_code)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def code_exists(self, short_code: str) -> bool:
        return await self.find_by_code(short_code) is not None

    async def increment_clicks(self, short_code: str) -> bool:
        """
        Atomically add one click and bump updated_at.

        Returns:
            True if a row was updated, False if short_code doesn't exist
        """
        return await self._run("increment_clicks", self._increment(short_code))

    async def _increment(self, short_code: str) -> bool:
        statement = (
            update(UrlMapping)
            .where(UrlMapping.short_code == short_code)
            .values(clicks=UrlMapping.clicks + 1, updated_at=utcnow())
        )
        result = await self.session.execute(statement)
        await self.session.commit()
        return result.rowcount > 0
