"""Run and run-sample link models."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from labrun.db.models.base import Base

if TYPE_CHECKING:
    from labrun.db.models.instrument import Instrument


class RunInstrument(Base):
    """One submission of samples against an instrument.

    The run_id and timestamp are assigned by the database at insert time.
    Runs are write-once.
    """

    __tablename__ = "run_instrument"

    run_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    instrument_id: Mapped[int] = mapped_column(
        ForeignKey("instrument.instrument_id"), nullable=False
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=True
    )

    # Relationships
    instrument: Mapped["Instrument"] = relationship("Instrument", back_populates="runs")
    samples: Mapped[list["RunSample"]] = relationship(
        "RunSample", back_populates="run", order_by="RunSample.sample_id"
    )

    def __repr__(self) -> str:
        return (
            f"<RunInstrument(run_id={self.run_id}, instrument_id={self.instrument_id}, "
            f"timestamp={self.timestamp})>"
        )


class RunSample(Base):
    """Link between a caller-supplied sample id and the run it was submitted in.

    A sample id is only unique within its run.
    """

    __tablename__ = "run_sample"

    sample_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    run_id: Mapped[int] = mapped_column(
        ForeignKey("run_instrument.run_id"), primary_key=True
    )

    run: Mapped["RunInstrument"] = relationship("RunInstrument", back_populates="samples")

    def __repr__(self) -> str:
        return f"<RunSample(sample_id={self.sample_id}, run_id={self.run_id})>"
