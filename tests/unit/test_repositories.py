"""Unit tests for repositories and the transactional run store."""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from labrun.core.decoder import Sample
from labrun.core.exceptions import StoreError
from labrun.db.database import DatabaseConfig
from labrun.db.models import Instrument, RunInstrument, RunSample
from labrun.db.repositories import (
    DEFAULT_INSTRUMENTS,
    InstrumentRepository,
    RunRepository,
)
from labrun.db.store import SqlRunStore


async def table_counts(db: DatabaseConfig) -> tuple[int, int]:
    """Count run and run-sample rows from a fresh session."""
    async with db.session() as session:
        runs = (await session.execute(select(func.count()).select_from(RunInstrument))).scalar_one()
        links = (await session.execute(select(func.count()).select_from(RunSample))).scalar_one()
    return runs, links


def samples(*ids: int) -> list[Sample]:
    return [Sample(id=i) for i in ids]


class TestInstrumentRepository:
    """Tests for InstrumentRepository reference data."""

    @pytest.mark.asyncio
    async def test_seeded_instruments(self, async_session: AsyncSession) -> None:
        """The db fixture seeds the demo instruments in id order."""
        result = await async_session.execute(select(Instrument).order_by(Instrument.instrument_id))
        instruments = list(result.scalars().all())

        assert [i.instrument_id for i in instruments] == [1, 2, 3]
        assert tuple(i.description for i in instruments) == DEFAULT_INSTRUMENTS

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, async_session: AsyncSession) -> None:
        repo = InstrumentRepository(async_session)

        created = await repo.seed_reference_data()

        assert created == []
        assert await repo.count() == 3

    @pytest.mark.asyncio
    async def test_get_by_id(self, async_session: AsyncSession) -> None:
        repo = InstrumentRepository(async_session)

        instrument = await repo.get_by_id(2)

        assert instrument is not None
        assert instrument.description == "Instrument 2"
        assert await repo.get_by_id(999) is None


class TestRunRepository:
    """Tests for RunRepository.create_with_samples."""

    @pytest.mark.asyncio
    async def test_create_with_samples(self, async_session: AsyncSession) -> None:
        repo = RunRepository(async_session)

        run = await repo.create_with_samples(instrument_id=1, sample_ids=[1, 2, 999])

        assert run.run_id == 1
        assert run.instrument_id == 1
        assert await repo.get_sample_ids(run.run_id) == [1, 2, 999]

    @pytest.mark.asyncio
    async def test_timestamp_assigned_by_database(self, async_session: AsyncSession) -> None:
        repo = RunRepository(async_session)

        run = await repo.create_with_samples(instrument_id=1, sample_ids=[5])
        await async_session.refresh(run)

        assert run.timestamp is not None

    @pytest.mark.asyncio
    async def test_empty_run(self, async_session: AsyncSession) -> None:
        repo = RunRepository(async_session)

        run = await repo.create_with_samples(instrument_id=3, sample_ids=[])

        assert run.run_id is not None
        assert await repo.get_sample_ids(run.run_id) == []
        assert await repo.count() == 1

    @pytest.mark.asyncio
    async def test_duplicate_sample_in_batch_violates_key(self, async_session: AsyncSession) -> None:
        repo = RunRepository(async_session)

        with pytest.raises(IntegrityError):
            await repo.create_with_samples(instrument_id=1, sample_ids=[4, 4])

    @pytest.mark.asyncio
    async def test_unknown_instrument_violates_foreign_key(
        self, async_session: AsyncSession
    ) -> None:
        repo = RunRepository(async_session)

        with pytest.raises(IntegrityError):
            await repo.create_with_samples(instrument_id=999, sample_ids=[1])


class TestSqlRunStore:
    """Tests for SqlRunStore.persist_run transaction handling."""

    @pytest.mark.asyncio
    async def test_first_run_id(self, db: DatabaseConfig) -> None:
        store = SqlRunStore(db)

        run_id = await store.persist_run(1, samples(1, 2, 999))

        assert run_id == 1
        assert await table_counts(db) == (1, 3)

    @pytest.mark.asyncio
    async def test_sequential_runs_get_increasing_ids(self, db: DatabaseConfig) -> None:
        store = SqlRunStore(db)

        first = await store.persist_run(1, samples(1))
        second = await store.persist_run(1, samples(1))
        third = await store.persist_run(2, samples(1))

        assert first < second < third

    @pytest.mark.asyncio
    async def test_returned_id_is_the_inserted_run(self, db: DatabaseConfig) -> None:
        store = SqlRunStore(db)

        await store.persist_run(1, samples(10))
        run_id = await store.persist_run(2, samples(20, 21))

        async with db.session() as session:
            run = await RunRepository(session).get_by_id(run_id)
            linked = await RunRepository(session).get_sample_ids(run_id)

        assert run is not None
        assert run.instrument_id == 2
        assert linked == [20, 21]

    @pytest.mark.asyncio
    async def test_same_sample_id_across_runs(self, db: DatabaseConfig) -> None:
        store = SqlRunStore(db)

        await store.persist_run(1, samples(1, 2))
        await store.persist_run(1, samples(1, 2))

        assert await table_counts(db) == (2, 4)

    @pytest.mark.asyncio
    async def test_empty_sample_sequence(self, db: DatabaseConfig) -> None:
        run_id = await SqlRunStore(db).persist_run(1, [])

        assert run_id == 1
        assert await table_counts(db) == (1, 0)

    @pytest.mark.asyncio
    async def test_link_failure_rolls_back_run(self, db: DatabaseConfig) -> None:
        """The run insert succeeds, a later link insert fails, nothing remains."""
        store = SqlRunStore(db)

        with pytest.raises(StoreError) as exc_info:
            await store.persist_run(1, samples(1, 2, 2))

        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert await table_counts(db) == (0, 0)

    @pytest.mark.asyncio
    async def test_unknown_instrument(self, db: DatabaseConfig) -> None:
        with pytest.raises(StoreError) as exc_info:
            await SqlRunStore(db).persist_run(999, samples(1))

        assert str(exc_info.value) == "FOREIGN KEY constraint failed"
        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert await table_counts(db) == (0, 0)

    @pytest.mark.asyncio
    async def test_failure_leaves_earlier_runs_intact(self, db: DatabaseConfig) -> None:
        store = SqlRunStore(db)
        await store.persist_run(1, samples(1, 2))

        with pytest.raises(StoreError):
            await store.persist_run(1, samples(3, 3))

        assert await table_counts(db) == (1, 2)

    @pytest.mark.asyncio
    async def test_instrument_id_beyond_64_bits(self, db: DatabaseConfig) -> None:
        """The store still fails cleanly when called directly with an oversized id."""
        with pytest.raises(StoreError):
            await SqlRunStore(db).persist_run(2**70, samples(1))

        assert await table_counts(db) == (0, 0)

    @pytest.mark.asyncio
    async def test_error_message_omits_statement(self, db: DatabaseConfig) -> None:
        with pytest.raises(StoreError) as exc_info:
            await SqlRunStore(db).persist_run(1, samples(1, 1))

        assert "UNIQUE constraint failed" in str(exc_info.value)
        assert "[SQL:" not in str(exc_info.value)
        assert "[parameters:" not in str(exc_info.value)


class TestConcurrentRuns:
    """Submissions in flight at the same time on one database."""

    @pytest.mark.asyncio
    async def test_failed_run_does_not_discard_a_committed_one(self, db: DatabaseConfig) -> None:
        store = SqlRunStore(db)

        failed, persisted = await asyncio.gather(
            store.persist_run(1, samples(1, 2, 2)),
            store.persist_run(1, samples(5, 6)),
            return_exceptions=True,
        )

        assert isinstance(failed, StoreError)
        assert isinstance(persisted, int)
        async with db.session() as session:
            run = await RunRepository(session).get_by_id(persisted)
            linked = await RunRepository(session).get_sample_ids(persisted)
        assert run is not None
        assert linked == [5, 6]
        assert await table_counts(db) == (1, 2)

    @pytest.mark.asyncio
    async def test_every_returned_run_exists_with_its_links(self, db: DatabaseConfig) -> None:
        store = SqlRunStore(db)
        batches = [samples(i, i + 100) for i in range(1, 9)]

        run_ids = await asyncio.gather(
            *(store.persist_run(1 + i % 3, batch) for i, batch in enumerate(batches))
        )

        assert len(set(run_ids)) == len(batches)
        async with db.session() as session:
            repo = RunRepository(session)
            for run_id, batch in zip(run_ids, batches):
                assert await repo.get_sample_ids(run_id) == [s.id for s in batch]
        assert await table_counts(db) == (8, 16)
