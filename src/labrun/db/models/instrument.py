"""Instrument reference model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from labrun.db.models.base import Base

if TYPE_CHECKING:
    from labrun.db.models.run import RunInstrument


class Instrument(Base):
    """Lab instrument that runs are submitted against.

    Instruments are reference data: they are seeded ahead of time and
    never created or modified by the ingestion pipeline.
    """

    __tablename__ = "instrument"

    instrument_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    runs: Mapped[list["RunInstrument"]] = relationship(
        "RunInstrument", back_populates="instrument"
    )

    def __repr__(self) -> str:
        return f"<Instrument(instrument_id={self.instrument_id}, description='{self.description}')>"
