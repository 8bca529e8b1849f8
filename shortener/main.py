"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (logging, CORS, etc.)
- Application metadata

Design Decisions:
- Clean separation: Routes, middleware, and app config are separate
- Redirect routes are registered last so the health endpoints and the
  API routes always match first, whatever REDIRECT_PATH_PREFIX is
"""

import logging

from fastapi import FastAPI, Depends, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.api import endpoints
from shortener.core.logging_config import setup_logging
from shortener.core.rate_limit import limiter
from shortener.core.setting import settings
from shortener.db.session import check_database, create_db_and_tables, get_session
from shortener.middleware.logging import add_logging_middleware

logger = logging.getLogger(__name__)

# Title and description are used in auto-generated API documentation
app = FastAPI(
    title="URL Shortener Service",
    description="Shortens long URLs, optionally under a custom code, and redirects short links",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI documentation
    redoc_url="/redoc",  # ReDoc documentation
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint for health checks."""
    return {
        "message": "URL Shortener Service",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Health check endpoint for monitoring.

    Returns:
        200 {"status": "healthy"} when the database answers,
        503 {"status": "unhealthy"} otherwise
    """
    try:
        await check_database(session)
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "unreachable"}
        )
    return {"status": "healthy", "database": "ok"}


app.include_router(endpoints.router, tags=["URL Shortener"])
app.include_router(endpoints.redirect_router, tags=["Redirect"])


@app.on_event("startup")
async def startup_event():
    """Configure logging and, outside production, create missing tables."""
    setup_logging(settings.LOG_LEVEL)
    if settings.AUTO_CREATE_TABLES:
        await create_db_and_tables()
        logger.info("Database tables ensured")
    logger.info(
        f"URL shortener started: env={settings.ENV_SETTING.value}, "
        f"base_url={settings.BASE_URL}"
    )
