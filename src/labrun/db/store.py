"""Transactional persistence of sample runs."""

from collections.abc import Sequence

import structlog
from sqlalchemy.exc import SQLAlchemyError

from labrun.core.decoder import Sample
from labrun.core.exceptions import StoreError
from labrun.db.database import DatabaseConfig
from labrun.db.repositories.instrument import InstrumentRepository
from labrun.db.repositories.run import RunRepository

logger = structlog.get_logger(__name__)


class SqlRunStore:
    """Run store backed by a relational database.

    Each persist_run() call opens its own session, so the run insert and
    every link insert share one transaction that either commits as a whole
    or is rolled back as a whole.
    """

    def __init__(self, db: DatabaseConfig) -> None:
        """Initialize the store.

        Args:
            db: Database configuration owning the engine and session factory
        """
        self.db = db

    async def persist_run(self, instrument_id: int, samples: Sequence[Sample]) -> int:
        """Persist a run and link its samples atomically.

        Args:
            instrument_id: Instrument the run targets
            samples: Samples to link, possibly empty

        Returns:
            The run_id generated for the new run

        Raises:
            StoreError: If any step fails. Nothing is left committed.
        """
        sample_ids = [sample.id for sample in samples]
        try:
            async with self.db.session() as session:
                run = await RunRepository(session).create_with_samples(instrument_id, sample_ids)
                run_id = run.run_id
        except (SQLAlchemyError, OverflowError) as e:
            # sqlite3 raises OverflowError itself for ids beyond 64 bits
            logger.error(
                "run_persist_failed",
                instrument_id=instrument_id,
                sample_count=len(sample_ids),
                error=str(e),
            )
            raise StoreError(_driver_message(e)) from e

        logger.info(
            "run_persisted",
            run_id=run_id,
            instrument_id=instrument_id,
            sample_count=len(sample_ids),
        )
        return run_id


def _driver_message(error: Exception) -> str:
    """Short description of a failed write, without the SQL or its parameters."""
    orig = getattr(error, "orig", None)
    if orig is not None:
        return str(orig)
    if isinstance(error, SQLAlchemyError):
        return "Run could not be persisted"
    return str(error)


async def initialize_store(db: DatabaseConfig, seed: bool = True) -> None:
    """Create tables and optionally seed the demo instruments.

    Intended for demo and test databases; failures propagate to the caller
    of the startup routine.

    Args:
        db: Database to initialize
        seed: Insert the default instruments when the table is empty
    """
    await db.create_tables()
    if not seed:
        return

    async with db.session() as session:
        created = await InstrumentRepository(session).seed_reference_data()
    if created:
        logger.info("instruments_seeded", count=len(created))
