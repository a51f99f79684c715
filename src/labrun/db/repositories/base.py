"""Base repository with generic CRUD operations."""

from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from labrun.db.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic base repository providing the operations shared by all models.

    Repositories never commit. The transaction boundary belongs to whoever
    opened the session.

    Type Parameters:
        ModelT: The SQLAlchemy model type this repository manages
    """

    def __init__(self, session: AsyncSession, model: type[ModelT]) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session for database operations
            model: The SQLAlchemy model class this repository manages
        """
        self.session = session
        self.model = model

    async def get_by_id(self, id: int) -> ModelT | None:
        """Retrieve a single record by primary key.

        Args:
            id: Primary key of the record to retrieve

        Returns:
            The model instance if found, None otherwise
        """
        return await self.session.get(self.model, id)

    async def count(self) -> int:
        """Count total number of records.

        Returns:
            Total number of records in the table
        """
        stmt = select(func.count()).select_from(self.model)
        result = await self.session.execute(stmt)
        return result.scalar_one()
