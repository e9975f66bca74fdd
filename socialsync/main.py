"""
SocialSync API - FastAPI application entry point.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings, validate_settings
from .logging_config import api_logger, configure_logging
from .middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from .responses import register_exception_handlers
from .routes import (
    auth_router,
    user_router,
    posts_router,
    scheduled_posts_router,
)
from .seed import seed_demo_data
from .storage import Storage, build_storage

VERSION = "1.0.0"


def create_app(storage: Optional[Storage] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around an explicitly supplied storage backend.

    When ``storage`` is omitted one is built from ``settings`` and seeded
    with demo data if ``seed_demo_data`` is enabled.
    """
    settings = settings or get_settings()
    validate_settings(settings)
    if settings.debug:
        configure_logging(level="DEBUG")

    if storage is None:
        storage = build_storage(settings)
        if settings.seed_demo_data:
            seed_demo_data(storage)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle - startup and shutdown"""
        api_logger.info(
            "Application started",
            environment=settings.environment,
            storage_backend=getattr(storage, "backend_name", "custom"),
        )
        yield
        api_logger.info("Application stopped")

    app = FastAPI(
        title=settings.app_name,
        description="Backend API for the SocialSync content dashboard",
        version=VERSION,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.storage = storage
    app.state.settings = settings

    register_exception_handlers(app)

    # Security headers middleware
    app.add_middleware(SecurityHeadersMiddleware)

    # Request logging middleware (only in debug mode)
    if settings.debug:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With",
        ],
        max_age=3600,  # Cache preflight requests for 1 hour
    )

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(posts_router)
    app.include_router(scheduled_posts_router)

    @app.get("/api/health")
    def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "environment": settings.environment,
            "storage_backend": getattr(app.state.storage, "backend_name", "custom"),
            "version": VERSION,
        }

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("socialsync.main:create_app", factory=True, host="0.0.0.0", port=8000)
