"""labrun FastAPI Application."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI

from labrun.api.schemas.common import HealthResponse
from labrun.api.v1.samples import router as samples_router
from labrun.core.config import Settings, get_settings
from labrun.core.logging import bind_request_context, configure_logging
from labrun.core.pipeline import IngestionPipeline
from labrun.core.validation import StructuralValidator, load_samples_schema
from labrun.db.database import DatabaseConfig
from labrun.db.store import SqlRunStore, initialize_store

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    db: Optional[DatabaseConfig] = None,
    validator: Optional[StructuralValidator] = None,
) -> FastAPI:
    """Build the application and wire its dependencies.

    The samples schema is loaded here, so a missing or broken schema
    fails application construction rather than a request.

    Args:
        settings: Application settings (defaults to environment settings)
        db: Database to use (defaults to one built from settings.database_url)
        validator: Structural validator (defaults to the configured samples schema)

    Returns:
        Configured FastAPI application

    Raises:
        SchemaLoadError: If the samples schema cannot be loaded
    """
    settings = settings or get_settings()
    db = db or DatabaseConfig(database_url=settings.database_url)
    if validator is None:
        validator = load_samples_schema(settings.samples_schema_path, settings.max_samples)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        configure_logging(settings.log_format, settings.log_level)
        logger.info("Starting labrun application", database=db.safe_url)

        if settings.init_data:
            await initialize_store(db)

        logger.info("labrun application startup complete")

        yield

        logger.info("Shutting down labrun application")
        await db.dispose()

    app = FastAPI(
        title="labrun",
        description="Lab instrument run ingestion service",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = db
    app.state.pipeline = IngestionPipeline(validator, SqlRunStore(db))

    app.middleware("http")(bind_request_context)
    app.include_router(samples_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    return app


def run() -> None:
    """Serve the application with uvicorn (``labrun`` console script)."""
    import uvicorn

    uvicorn.run("labrun.main:create_app", factory=True, host="0.0.0.0", port=8080)
