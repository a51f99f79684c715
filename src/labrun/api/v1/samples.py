"""Sample submission endpoint.

A thin adapter: extracts the instrument id and raw body, hands them to the
ingestion pipeline, and maps the outcome to an HTTP response.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from labrun.api.deps import get_pipeline
from labrun.api.schemas.common import ValidationErrorResponse
from labrun.api.schemas.run import RunCreatedResponse
from labrun.core.exceptions import ClientInputError, InternalConsistencyError, StoreError
from labrun.core.pipeline import IngestionPipeline

router = APIRouter(prefix="/lab/instrument", tags=["samples"])


@router.post(
    "/{instrument_id}/samples",
    response_model=RunCreatedResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "content": {"text/plain": {}},
            "description": "The run could not be decoded or persisted",
        },
    },
)
async def submit_samples(
    instrument_id: str,
    request: Request,
    pipeline: IngestionPipeline = Depends(get_pipeline),
) -> RunCreatedResponse | Response:
    """Submit a batch of samples as a new run on an instrument.

    The body must be a JSON array of sample objects, each with a single
    integer ``id``. The batch is persisted atomically as one run.

    Args:
        instrument_id: Instrument path segment (must be a decimal integer)
        request: Incoming request, read for its raw body
        pipeline: Ingestion pipeline dependency

    Returns:
        The generated run id as ``{"runId": <int>}``

    Responses:
        400: ``{"errors": [...]}`` for a bad instrument id or schema violations
        500: Plain-text detail if decoding or persistence fails
    """
    body = await request.body()

    try:
        run_id = await pipeline.submit(instrument_id, body)
    except ClientInputError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ValidationErrorResponse(errors=e.reasons).model_dump(),
        )
    except (InternalConsistencyError, StoreError) as e:
        return PlainTextResponse(str(e), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return RunCreatedResponse(run_id=run_id)
