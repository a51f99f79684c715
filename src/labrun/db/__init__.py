"""Database module for labrun."""

from labrun.db.database import DatabaseConfig
from labrun.db.models import Base, Instrument, RunInstrument, RunSample
from labrun.db.store import SqlRunStore, initialize_store

__all__ = [
    # Database configuration
    "DatabaseConfig",
    "initialize_store",
    # Persistence
    "SqlRunStore",
    # Base
    "Base",
    # Models
    "Instrument",
    "RunInstrument",
    "RunSample",
]
