"""Exception hierarchy for the run ingestion pipeline.

Each request-time exception maps to exactly one HTTP outcome:

- ClientInputError -> 400 with a list of reasons
- InternalConsistencyError -> 500 (validator and decoder disagree)
- StoreError -> 500 (transaction failed and was rolled back)

SchemaLoadError is only raised while building the application.
"""

from __future__ import annotations


class LabRunError(Exception):
    """Base class for all labrun errors."""


class ClientInputError(LabRunError):
    """The request was rejected before anything was persisted.

    Attributes:
        reasons: Human-readable descriptions, one per problem found
    """

    def __init__(self, reasons: list[str]) -> None:
        super().__init__("; ".join(reasons))
        self.reasons = list(reasons)


class InternalConsistencyError(LabRunError):
    """A payload that passed schema validation could not be decoded."""


class StoreError(LabRunError):
    """Persisting a run failed; the transaction was rolled back."""


class SchemaLoadError(LabRunError):
    """The samples schema document could not be loaded or is not a valid schema."""
