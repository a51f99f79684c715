"""Repository for Instrument reference data."""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from labrun.db.models.instrument import Instrument
from labrun.db.repositories.base import BaseRepository

DEFAULT_INSTRUMENTS = ("Instrument 1", "Instrument 2", "Instrument 3")


class InstrumentRepository(BaseRepository[Instrument]):
    """Repository for Instrument model."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Instrument)

    async def seed_reference_data(
        self, descriptions: Sequence[str] = DEFAULT_INSTRUMENTS
    ) -> list[Instrument]:
        """Insert the demo instruments if the table is empty.

        Args:
            descriptions: Descriptions of the instruments to create, in id order

        Returns:
            The instruments created (empty if the table was already populated)
        """
        if await self.count() > 0:
            return []

        instruments = [Instrument(description=d) for d in descriptions]
        self.session.add_all(instruments)
        await self.session.flush()
        return instruments
