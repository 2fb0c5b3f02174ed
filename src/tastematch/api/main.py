"""
FastAPI application for the tastematch API.

Serves top-N taste matches computed on demand from the configured store
(SQLite by default, PostgreSQL when DATABASE_URL is set).
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from ..core.config import get_settings
from ..core.errors import TasteMatchError
from .dependencies import ServiceDependency
from .errors import APIError, api_error_handler, domain_error_handler
from .routers import entities, matches

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.

    Shutdown:
    - Drop the cached matching service
    - Close database connections
    """
    logger.info("Starting tastematch API...")

    yield

    logger.info("Shutting down tastematch API...")
    from ..pg_connection import close_db
    from ..services import reset_matching_service

    reset_matching_service()
    try:
        close_db()
    except Exception as e:
        logger.warning(f"Error closing database connections: {e}")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()
    app = FastAPI(
        title="tastematch API",
        description="Top-N taste matching over five-component preference vectors",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Register custom error handlers for consistent error responses
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(TasteMatchError, domain_error_handler)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with consistent format."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An internal error occurred",
                    "detail": str(exc) if settings.debug else None,
                }
            },
        )

    # Health check endpoints
    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(tz=timezone.utc).isoformat()}

    @app.get("/health/db", tags=["health"])
    def health_check_db(service: ServiceDependency):
        """Database connectivity health check."""
        try:
            status = service.get_status()
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "database": "disconnected",
                    "error": "Database connection check failed",
                    "timestamp": datetime.now(tz=timezone.utc).isoformat(),
                },
            )
        return {
            "status": "healthy",
            "database": "connected",
            "population": status["population"],
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        }

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "docs": "/docs",
        }

    # Matches endpoints - top-N and pairwise taste scores
    app.include_router(
        matches.router, prefix=f"{settings.api_prefix}/matches", tags=["matches"]
    )
    # Entity endpoints - registration and taste profile updates
    app.include_router(
        entities.router, prefix=f"{settings.api_prefix}/entities", tags=["entities"]
    )

    return app


# Create app instance
app = create_app()
