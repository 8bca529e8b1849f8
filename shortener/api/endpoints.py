"""
FastAPI Endpoints for URL Shortener Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request parsing (Pydantic models)
- Rate limiting
- Translating service errors into HTTP responses
- Delegating to service layer

Design Principles:
- Thin endpoints: All business logic lives in services
- Every error of the service taxonomy maps to a typed response:
  ValidationError 400, ConflictError 409, ExhaustedError 500,
  NotFoundError 404, StoreUnavailableError 503
"""

import logging
from typing import Optional

from fastapi import APIRouter, Request, Depends, HTTPException, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.api.schemas import (
    ApiResponse,
    ShortenData,
    ShortenRequest,
    UrlRecord,
)
from shortener.core.exceptions import (
    ConflictError,
    ExhaustedError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from shortener.core.rate_limit import limiter, RATE_LIMITS
from shortener.core.setting import settings
from shortener.db.session import get_session
from shortener.db.store import UrlMappingStore
from shortener.services.allocator import CodeAllocator
from shortener.services.code_generator import ShortCodeGenerator
from shortener.services.redirect_service import RedirectResolver
from shortener.services.stats_service import StatsService

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "The service is temporarily unavailable. Please try again."


def _normalize_prefix(prefix: str) -> str:
    stripped = prefix.strip("/")
    return f"/{stripped}" if stripped else ""


router = APIRouter()
redirect_router = APIRouter(prefix=_normalize_prefix(settings.REDIRECT_PATH_PREFIX))


def get_store(session: AsyncSession = Depends(get_session)) -> UrlMappingStore:
    return UrlMappingStore(session, timeout=settings.STORE_TIMEOUT_SECONDS)


def get_allocator(store: UrlMappingStore = Depends(get_store)) -> CodeAllocator:
    return CodeAllocator(
        store=store,
        generator=ShortCodeGenerator(length=settings.SHORT_CODE_LENGTH),
        base_url=settings.BASE_URL,
        path_prefix=settings.REDIRECT_PATH_PREFIX,
        max_attempts=settings.SHORT_CODE_MAX_ATTEMPTS,
        max_url_length=settings.MAX_URL_LENGTH,
        custom_code_max_length=settings.CUSTOM_CODE_MAX_LENGTH,
    )


def get_resolver(store: UrlMappingStore = Depends(get_store)) -> RedirectResolver:
    return RedirectResolver(store)


def get_stats_service(store: UrlMappingStore = Depends(get_store)) -> StatsService:
    return StatsService(store)


def error_response(status_code: int, message: str, field: Optional[str] = None) -> JSONResponse:
    body = ApiResponse(success=False, error=message, field=field)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@router.post(
    "/shorten",
    response_model=ApiResponse[ShortenData],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    description="Takes a long URL (and optionally a custom code) and returns a short URL"
)
@limiter.limit(RATE_LIMITS["shorten"])
async def create_short_url(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    body: ShortenRequest,
    allocator: CodeAllocator = Depends(get_allocator)
):
    """
    Create a new short URL from a long URL.

    Returns:
        201 with {"success": true, "data": {"shortUrl", "shortCode", "originalUrl"}}
        or an error envelope {"success": false, "error": ..., "field"?: ...}
    """
    try:
        result = await allocator.allocate(body.url, body.custom_code)
    except ValidationError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, e.message, field=e.field)
    except ConflictError:
        return error_response(
            status.HTTP_409_CONFLICT,
            "Code already in use. Please choose another one.",
            field="customCode"
        )
    except ExhaustedError:
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Could not create a short URL. Please try again later."
        )
    except StoreUnavailableError as e:
        logger.error(f"Shorten failed, store unavailable: {e}")
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, UNAVAILABLE_MESSAGE)

    data = ShortenData(
        short_url=result.short_url,
        short_code=result.short_code,
        original_url=result.mapping.original_url,
    )
    return ApiResponse[ShortenData](success=True, data=data)


@router.get(
    "/stats/{short_code}",
    response_model=ApiResponse[UrlRecord],
    response_model_exclude_none=True,
    summary="Get URL statistics",
    description="Returns the stored mapping including click count and timestamps"
)
@limiter.limit(RATE_LIMITS["stats"])
async def get_url_stats(
    short_code: str,
    request: Request,  # Required for rate limiting
    stats_service: StatsService = Depends(get_stats_service)
):
    """
    Get statistics for a short URL.

    Raises:
        HTTPException 404: If short code not found
        HTTPException 503: If the store is unavailable
        HTTPException 429: If rate limit exceeded
    """
    try:
        mapping = await stats_service.get_stats(short_code)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=UNAVAILABLE_MESSAGE
        )

    record = UrlRecord(
        id=mapping.id,
        original_url=mapping.original_url,
        short_code=mapping.short_code,
        created_at=mapping.created_at,
        updated_at=mapping.updated_at,
        clicks=mapping.clicks,
    )
    return ApiResponse[UrlRecord](success=True, data=record)


@redirect_router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    description="Takes a short code and redirects to the original long URL"
)
@limiter.limit(RATE_LIMITS["redirect"])
async def redirect_to_url(
    short_code: str,
    request: Request,
    resolver: RedirectResolver = Depends(get_resolver)
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    Uses a temporary redirect (302) so browsers come back on every click
    and each visit is counted.

    Raises:
        HTTPException 404: If short code not found
        HTTPException 503: If the store is unavailable
        HTTPException 429: If rate limit exceeded
    """
    try:
        original_url = await resolver.resolve(short_code)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=UNAVAILABLE_MESSAGE
        )

    return RedirectResponse(
        url=original_url,
        status_code=status.HTTP_302_FOUND
    )
