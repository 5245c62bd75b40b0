"""FastAPI application entry point.

This module builds the FastAPI application: settings, logging,
database, services, middleware and route registration.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

from noisewatch import __version__
from noisewatch.api.endpoints import health, reports
from noisewatch.core.config import Settings, get_settings
from noisewatch.core.logging import setup_logging
from noisewatch.middleware.error_handler import ErrorHandlerMiddleware, setup_exception_handlers
from noisewatch.services.database import Database
from noisewatch.services.ingestion import ReportIngestionService
from noisewatch.services.media import LocalMediaStore, MediaStore
from noisewatch.services.report_store import ReportStore


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Creates the schema when configured to, and disposes the
    connection pool on shutdown.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info("Starting Noise Report API...")
    logger.info("Environment: {}", settings.APP_ENV)
    logger.info("Debug mode: {}", settings.DEBUG)

    if settings.CREATE_TABLES:
        await database.create_all()

    yield

    logger.info("Shutting down Noise Report API...")
    await database.dispose()


def create_application(
    settings: Optional[Settings] = None,
    media_store: Optional[MediaStore] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted.
        media_store: Media storage backend; local disk storage when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Noise Report API",
        description=(
            "Submit geotagged noise-disturbance reports with an audio or "
            "video attachment, list them, and aggregate them for map display."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    database = Database.from_settings(settings)
    report_store = ReportStore(database)

    local_media: Optional[LocalMediaStore] = None
    if media_store is None:
        local_media = LocalMediaStore(
            Path(settings.MEDIA_DIR),
            settings.MEDIA_URL_PREFIX,
            max_bytes=settings.MEDIA_MAX_BYTES,
        )
        local_media.ensure_directory()
        media_store = local_media

    app.state.settings = settings
    app.state.database = database
    app.state.report_store = report_store
    app.state.ingestion_service = ReportIngestionService(report_store, media_store)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add error handling middleware
    app.add_middleware(ErrorHandlerMiddleware)

    # Setup exception handlers
    setup_exception_handlers(app)

    # Register routers
    app.include_router(health.router)
    app.include_router(reports.router, prefix=settings.API_PREFIX)

    if local_media is not None:
        app.mount(
            settings.MEDIA_URL_PREFIX,
            StaticFiles(directory=local_media.directory),
            name="media",
        )

    return app


def get_application() -> FastAPI:
    """Application factory for ``uvicorn --factory noisewatch.main:get_application``."""
    return create_application()
