"""
Database Models for URL Shortener Service

This module defines the SQLModel schema for UrlMapping, the association
between a short code and its original URL plus click accounting.

Design Decisions:
- Unique index on short_code: the storage layer is the authority on
  uniqueness, independent of any application-level pre-check
- Index on created_at for time-based queries
- clicks denormalized on the row and only ever changed by an atomic UPDATE
"""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import String, DateTime, Integer, Text


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class UrlMapping(SQLModel, table=True):
    """
    Main table storing URL shortening mappings.

    Fields:
    - id: Auto-incrementing primary key (surrogate key)
    - original_url: The long URL that was shortened
    - short_code: Unique short code, [A-Za-z0-9_-]{1,255}
    - created_at: Timestamp when the mapping was created
    - updated_at: Timestamp of the last change (creation or last redirect)
    - clicks: Number of successful redirects

    Indexes:
    - short_code: Unique index for fast lookups (most critical path)
    - created_at: For time-based analytics queries
    """
    __tablename__ = "url_mappings"

    id: Optional[int] = Field(default=None, primary_key=True)
    original_url: str = Field(sa_column=Column(Text, nullable=False))
    short_code: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True),
        max_length=255
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    clicks: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
