"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from labrun.db.database import DatabaseConfig
from labrun.db.store import initialize_store


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[DatabaseConfig, None]:
    """Fresh in-memory database with tables and the demo instruments."""
    db = DatabaseConfig(database_url="sqlite+aiosqlite:///:memory:")
    await initialize_store(db)

    yield db

    await db.dispose()


@pytest_asyncio.fixture
async def async_session(db: DatabaseConfig) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for testing."""
    async with db.session_factory() as session:
        yield session
        await session.rollback()
