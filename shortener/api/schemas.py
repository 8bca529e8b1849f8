"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Wire format uses camelCase keys ({"url", "customCode"} in,
{"success", "data", "error"} out); Python code uses snake_case attributes.

Design Principles:
- Request models: Define input shape (format rules live in core.validators
  so the service layer enforces them for every caller)
- Response models: Define output structure
"""

from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(CamelModel):
    """Request model for URL shortening endpoint."""
    url: str = Field(..., description="The long URL to shorten")
    custom_code: Optional[str] = Field(
        default=None,
        description="Optional short code to use instead of a generated one"
    )


class ShortenData(CamelModel):
    """Payload returned after a successful shortening."""
    short_url: str = Field(..., description="The complete short URL")
    short_code: str = Field(..., description="The short code")
    original_url: str = Field(..., description="The original long URL")


class UrlRecord(CamelModel):
    """A stored mapping as exposed by the stats endpoint."""
    id: int
    original_url: str
    short_code: str
    created_at: datetime
    updated_at: datetime
    clicks: int


class ApiResponse(CamelModel, Generic[T]):
    """Envelope for every JSON response of the shortening API."""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    field: Optional[str] = Field(
        default=None,
        description="Name of the offending input field for validation errors"
    )
