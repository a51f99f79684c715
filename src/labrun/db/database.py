"""Database configuration and session management."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, nullcontext
from typing import Optional

import structlog
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from labrun.db.models import Base

logger = structlog.get_logger(__name__)


class DatabaseConfig:
    """Database configuration and session factory.

    One instance is created at startup and handed to the components that
    need it. Nothing in labrun reaches for a module-level connection.
    """

    def __init__(
        self,
        database_url: str = "sqlite+aiosqlite:///./lab.db",
        echo: bool = False,
    ) -> None:
        """Initialize database configuration.

        Args:
            database_url: SQLAlchemy database URL (async driver required)
            echo: Enable SQL query logging
        """
        self.database_url = database_url
        self.echo = echo
        url = make_url(database_url)
        self.is_sqlite = url.get_backend_name() == "sqlite"
        self.is_memory = self.is_sqlite and url.database in (None, "", ":memory:")
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        # All sessions of an in-memory database share one connection, so their
        # transactions would interleave on it. They are taken one at a time.
        self._memory_lock: Optional[asyncio.Lock] = asyncio.Lock() if self.is_memory else None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create async engine.

        Returns:
            AsyncEngine instance
        """
        if self._engine is None:
            engine_kwargs: dict = {
                "echo": self.echo,
            }

            if self.is_memory:
                # A single shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
                engine_kwargs["connect_args"] = {"check_same_thread": False}
            elif self.is_sqlite:
                # NullPool is needed for SQLite (doesn't support connection pooling well)
                engine_kwargs["poolclass"] = NullPool
            else:
                engine_kwargs["pool_size"] = 10
                engine_kwargs["max_overflow"] = 20
                engine_kwargs["pool_recycle"] = 3600
                engine_kwargs["pool_pre_ping"] = True

            self._engine = create_async_engine(
                self.database_url,
                **engine_kwargs,
            )

            # SQLite only enforces the instrument foreign key when asked to
            if self.is_sqlite:

                @event.listens_for(self._engine.sync_engine, "connect")
                def set_sqlite_pragma(dbapi_conn, connection_record):
                    """Enable SQLite constraints and locking behaviour on connection."""
                    cursor = dbapi_conn.cursor()
                    if not self.is_memory:
                        cursor.execute("PRAGMA journal_mode=WAL")
                    cursor.execute("PRAGMA foreign_keys=ON")
                    cursor.execute("PRAGMA busy_timeout=5000")
                    cursor.close()

        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create async session factory.

        Returns:
            async_sessionmaker instance
        """
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_factory

    async def create_tables(self) -> None:
        """Create all database tables.

        This is for demo and test databases. Deployed databases are
        managed with Alembic migrations.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_created", url=self.safe_url)

    async def drop_tables(self) -> None:
        """Drop all database tables.

        Warning: This will delete all data!
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """Dispose of the engine and close all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @property
    def safe_url(self) -> str:
        """Database URL with any password masked, for logging."""
        return make_url(self.database_url).render_as_string(hide_password=True)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Async context manager for a transactional database session.

        Commits when the block exits normally and rolls back on any error.
        On an in-memory database sessions are serialized, so a rollback in
        one can never discard work another has already committed.

        Yields:
            AsyncSession instance

        Example:
            async with db_config.session() as session:
                repo = RunRepository(session)
                run = await repo.create_with_samples(1, [10, 11])
        """
        async with self._memory_lock or nullcontext():
            async with self.session_factory() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
