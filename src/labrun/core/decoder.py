"""Decoding of schema-validated sample batches."""

import structlog
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from labrun.core.exceptions import InternalConsistencyError

logger = structlog.get_logger(__name__)


class Sample(BaseModel):
    """A caller-supplied sample to be analysed by a lab instrument.

    Attributes:
        id: Caller-assigned sample identifier (unique within a run only)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int


_samples_adapter = TypeAdapter(list[Sample])


def decode_samples(payload: bytes) -> list[Sample]:
    """Decode a payload that already passed schema validation.

    Args:
        payload: Raw JSON array of sample objects

    Returns:
        Samples in submission order

    Raises:
        InternalConsistencyError: If the payload cannot be decoded. This means
            the schema accepted something the decoder does not understand.
    """
    try:
        return _samples_adapter.validate_json(payload)
    except ValidationError as e:
        logger.error("decode_mismatch", error_count=e.error_count(), errors=e.errors())
        raise InternalConsistencyError(
            f"Validated payload could not be decoded: {e}"
        ) from e
