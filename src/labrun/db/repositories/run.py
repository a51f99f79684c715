"""Repository for runs and their sample links."""

from collections.abc import Sequence

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from labrun.db.models.run import RunInstrument, RunSample
from labrun.db.repositories.base import BaseRepository


class RunRepository(BaseRepository[RunInstrument]):
    """Repository for RunInstrument model.

    Creates a run and its sample links inside the caller's transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize run repository.

        Args:
            session: SQLAlchemy async session for database operations
        """
        super().__init__(session, RunInstrument)

    async def create_with_samples(
        self, instrument_id: int, sample_ids: Sequence[int]
    ) -> RunInstrument:
        """Create a run and link every sample id to it.

        The run row is flushed first so that its generated run_id is read
        back on the same connection and transaction that inserted it.
        Nothing is committed here; if a link insert fails the caller's
        rollback discards the run as well.

        Args:
            instrument_id: Instrument the run targets (must exist)
            sample_ids: Caller-supplied sample ids, in submission order

        Returns:
            The new run with run_id populated

        Raises:
            IntegrityError: Unknown instrument, or a sample id repeated within the batch

        Example:
            async with db.session() as session:
                run = await RunRepository(session).create_with_samples(1, [1, 2, 999])
        """
        run = RunInstrument(instrument_id=instrument_id)
        self.session.add(run)
        await self.session.flush()  # Get the run ID

        if sample_ids:
            await self.session.execute(
                insert(RunSample),
                [{"sample_id": sample_id, "run_id": run.run_id} for sample_id in sample_ids],
            )

        return run

    async def get_sample_ids(self, run_id: int) -> list[int]:
        """Get the sample ids linked to a run, in ascending order.

        Only used to verify what a committed run linked. Nothing on the
        HTTP surface reads runs back.

        Args:
            run_id: Run to look up

        Returns:
            Linked sample ids (empty if the run has none or does not exist)
        """
        stmt = (
            select(RunSample.sample_id)
            .where(RunSample.run_id == run_id)
            .order_by(RunSample.sample_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
