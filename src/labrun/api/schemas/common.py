"""Common Pydantic schemas for the labrun REST API."""

from pydantic import BaseModel, Field


class ValidationErrorResponse(BaseModel):
    """Error report returned with 400 responses.

    Attributes:
        errors: Human-readable descriptions, one per problem found
    """

    errors: list[str] = Field(..., description="Reasons the request was rejected")


class HealthResponse(BaseModel):
    """Liveness probe response."""

    status: str
