"""SQLAlchemy ORM models for the labrun database schema."""

from labrun.db.models.base import Base
from labrun.db.models.instrument import Instrument
from labrun.db.models.run import RunInstrument, RunSample

__all__ = [
    # Base
    "Base",
    # Models
    "Instrument",
    "RunInstrument",
    "RunSample",
]
