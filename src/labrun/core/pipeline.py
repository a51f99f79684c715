"""Ingestion pipeline: parse, validate, decode and persist a sample batch.

The pipeline moves through PipelineStage values in order and stops at the
first failure. It holds no state between submissions; every collaborator
is passed in at construction time.
"""

import re
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Protocol

import structlog

from labrun.core.decoder import Sample, decode_samples
from labrun.core.exceptions import ClientInputError, InternalConsistencyError, StoreError
from labrun.core.validation import Invalid, StructuralValidator

logger = structlog.get_logger(__name__)

INVALID_INSTRUMENT_ID = "Instrument ID in URL must be an integer."

# Optional sign followed by ASCII digits only
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

# Range of the INTEGER columns instrument ids are stored in
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class PipelineStage(str, Enum):
    """Stages a submission passes through."""

    PARSING_INSTRUMENT_ID = "parsing_instrument_id"
    VALIDATING = "validating"
    DECODING = "decoding"
    PERSISTING = "persisting"
    SUCCEEDED = "succeeded"


class RunStore(Protocol):
    """Anything that can persist a run atomically."""

    async def persist_run(self, instrument_id: int, samples: Sequence[Sample]) -> int:
        """Persist a run with its samples and return the generated run id.

        Raises:
            StoreError: If the run could not be persisted
        """
        ...


SampleDecoder = Callable[[bytes], list[Sample]]


def parse_instrument_id(raw: str) -> int:
    """Parse the instrument id path segment.

    Args:
        raw: Path segment as received

    Returns:
        The instrument id

    Raises:
        ClientInputError: If the segment is not a decimal integer that fits
            in a signed 64-bit column
    """
    if not _INTEGER_RE.fullmatch(raw):
        raise ClientInputError([INVALID_INSTRUMENT_ID])
    # Bound the digit count before int(), which refuses very long strings itself
    if len(raw.lstrip("+-").lstrip("0")) > len(str(INT64_MAX)):
        raise ClientInputError([INVALID_INSTRUMENT_ID])
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ClientInputError([INVALID_INSTRUMENT_ID])
    return value


class IngestionPipeline:
    """Validate-then-persist pipeline for sample batches.

    Example:
        >>> pipeline = IngestionPipeline(validator, SqlRunStore(db))
        >>> run_id = await pipeline.submit("1", b'[{"id": 1}, {"id": 2}]')
    """

    def __init__(
        self,
        validator: StructuralValidator,
        store: RunStore,
        decoder: SampleDecoder = decode_samples,
    ) -> None:
        """Initialize the pipeline.

        Args:
            validator: Structural validator for request bodies
            store: Run store used to persist accepted batches
            decoder: Converts a validated body into samples
        """
        self.validator = validator
        self.store = store
        self.decoder = decoder

    async def submit(self, raw_instrument_id: str, body: bytes) -> int:
        """Run a submission through every stage.

        Args:
            raw_instrument_id: Instrument id path segment, not yet parsed
            body: Raw request body

        Returns:
            The run id generated by the store

        Raises:
            ClientInputError: Bad instrument id or schema violations (nothing persisted)
            InternalConsistencyError: Validated body could not be decoded
            StoreError: The store failed and rolled back
        """
        log = logger.bind(instrument_id=raw_instrument_id)

        stage = PipelineStage.PARSING_INSTRUMENT_ID
        try:
            instrument_id = parse_instrument_id(raw_instrument_id)
        except ClientInputError:
            log.info("run_rejected", stage=stage.value, reason="instrument_id")
            raise

        stage = PipelineStage.VALIDATING
        result = self.validator.validate(body)
        if isinstance(result, Invalid):
            log.info("run_rejected", stage=stage.value, errors=result.reasons)
            raise ClientInputError(result.reasons)

        stage = PipelineStage.DECODING
        try:
            samples = self.decoder(body)
        except InternalConsistencyError:
            log.exception("run_failed", stage=stage.value)
            raise

        stage = PipelineStage.PERSISTING
        try:
            run_id = await self.store.persist_run(instrument_id, samples)
        except StoreError:
            log.error("run_failed", stage=stage.value, sample_count=len(samples))
            raise

        stage = PipelineStage.SUCCEEDED
        log.info("run_accepted", stage=stage.value, run_id=run_id, sample_count=len(samples))
        return run_id
