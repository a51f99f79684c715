"""Pydantic schemas for the labrun REST API."""

from labrun.api.schemas.common import HealthResponse, ValidationErrorResponse
from labrun.api.schemas.run import RunCreatedResponse

__all__ = [
    "HealthResponse",
    "RunCreatedResponse",
    "ValidationErrorResponse",
]
