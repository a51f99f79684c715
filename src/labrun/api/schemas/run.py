"""Pydantic schemas for run submission responses."""

from pydantic import BaseModel, ConfigDict, Field


class RunCreatedResponse(BaseModel):
    """Response for a newly persisted run.

    Attributes:
        run_id: Identifier generated for the run (serialized as ``runId``)
    """

    model_config = ConfigDict(populate_by_name=True)

    run_id: int = Field(alias="runId", description="Generated run identifier")
