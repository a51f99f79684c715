"""Repository pattern implementation for labrun database operations.

Repositories:
    - BaseRepository: Generic operations for all models
    - InstrumentRepository: Instrument reference data seeding
    - RunRepository: Atomic creation of runs with their sample links
"""

from labrun.db.repositories.base import BaseRepository
from labrun.db.repositories.instrument import DEFAULT_INSTRUMENTS, InstrumentRepository
from labrun.db.repositories.run import RunRepository

__all__ = [
    # Base
    "BaseRepository",
    # Repositories
    "InstrumentRepository",
    "RunRepository",
    # Reference data
    "DEFAULT_INSTRUMENTS",
]
