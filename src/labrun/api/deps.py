"""FastAPI dependency injection functions."""

from fastapi import Request

from labrun.core.pipeline import IngestionPipeline


def get_pipeline(request: Request) -> IngestionPipeline:
    """Get the ingestion pipeline built by the application factory.

    Tests override this dependency to substitute fakes.
    """
    return request.app.state.pipeline
