"""FastAPI application factory"""
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Response
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from slowapi.errors import RateLimitExceeded
from starlette.middleware.gzip import GZipMiddleware

from zenovia import __version__
from zenovia.api import admin, auth, experts, health
from zenovia.config import Settings, get_settings
from zenovia.context import AppContext
from zenovia.database import Database
from zenovia.errors import register_error_handlers
from zenovia.middleware import (
    AccessLogMiddleware,
    BodySizeLimitMiddleware,
    GlobalRateLimitMiddleware,
    OriginPolicyCORSMiddleware,
    SecurityHeadersMiddleware,
    build_origin_policy,
    create_limiter,
    rate_limit_exceeded_handler,
)
from zenovia.seed import run_seeds
from zenovia.utils.logger import logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect, index and seed before serving; close the client on the way out"""
    context: AppContext = app.state.context
    settings = context.settings

    # Startup
    logger.info("Wellness API starting up", extra={
        "environment": settings.NODE_ENV,
        "port": settings.PORT,
    })
    await context.startup()
    await run_seeds(context)
    logger.info(f"Server running in {settings.NODE_ENV} mode on port {settings.PORT}")
    yield
    # Shutdown
    context.shutdown()
    logger.info("Wellness API shut down")


def create_app(settings: Optional[Settings] = None, database: Optional[Any] = None) -> FastAPI:
    """Build a fully wired application.

    ``database`` defaults to a motor-backed :class:`Database` for
    ``settings.MONGODB_URI``; tests pass an in-memory stand-in.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    if database is None:
        database = Database.from_settings(settings)

    app = FastAPI(
        title="Wellness App API",
        description="Authentication, expert profiles and admin management",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = AppContext.build(settings, database)

    # ===== Middleware Setup =====
    # Starlette runs the last added middleware first, so the order below is
    # the reverse of the request path.

    # Rate limiting
    app.state.limiter = create_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(GlobalRateLimitMiddleware)

    # Access logging + metrics
    app.add_middleware(AccessLogMiddleware, log_format="dev" if settings.is_development else "combined")

    # Body size limit
    app.add_middleware(BodySizeLimitMiddleware, max_size=settings.MAX_REQUEST_SIZE)

    # Compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # CORS
    app.add_middleware(OriginPolicyCORSMiddleware, policy=build_origin_policy(settings))

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    # ===== Static files =====
    settings.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")

    # ===== Route Setup =====
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(experts.router)
    app.include_router(admin.router)

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "success": True,
            "message": "Welcome to Wellness App API",
            "version": __version__,
            "documentation": {
                "authentication": "/api/auth",
                "experts": "/api/experts",
                "admin": "/api/admin",
                "health": "/health",
            },
        }

    if settings.METRICS_ENABLED:
        @app.get(settings.METRICS_PATH, include_in_schema=False)
        def metrics():
            return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # ===== Error Handlers =====
    register_error_handlers(app)

    return app
