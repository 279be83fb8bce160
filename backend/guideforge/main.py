"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from guideforge import __version__
from guideforge.api.v1 import health, manuals, users
from guideforge.api.v1.errors import register_exception_handlers
from guideforge.config import settings
from guideforge.db.session import Database
from guideforge.logging import setup_logging
from guideforge.services.storage.storage_service import create_storage_service

# Configure logging before anything else
setup_logging()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    logger.info("Starting GuideForge API", debug=settings.debug, storage_backend=settings.storage_backend)

    database = Database(settings.database_url, echo=settings.debug)
    if database.url.startswith("sqlite"):
        await database.init_models()
    app.state.database = database

    storage = create_storage_service()
    await storage.ensure_ready()
    app.state.storage = storage

    yield

    # Shutdown
    logger.info("Shutting down GuideForge API")
    await database.dispose()
    logger.info("Database connections disposed")


def create_app() -> FastAPI:
    """Build the application with middleware, routes and error handlers."""
    app = FastAPI(
        title="GuideForge API",
        description="Authoring backend for step-by-step instruction manuals",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # API routes
    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(manuals.router, prefix="/api/v1")

    # Local uploads are served directly; the directory is created at startup
    if settings.storage_backend == "local" and settings.static_url.startswith("/"):
        app.mount(settings.static_url, StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    return app


app = create_app()
