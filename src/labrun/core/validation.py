"""Structural validation of request payloads against a JSON Schema.

The pipeline only depends on the StructuralValidator protocol; the concrete
JsonSchemaValidator wraps a compiled ``jsonschema`` validator. Schema
documents are loaded once at startup with load_samples_schema().
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol, Union

import structlog
from jsonschema.exceptions import SchemaError
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for

from labrun.core.exceptions import SchemaLoadError

logger = structlog.get_logger(__name__)

MALFORMED_JSON = "Malformed JSON"

DEFAULT_SAMPLES_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "json_schemas" / "samples.json"


@dataclass(frozen=True)
class Valid:
    """The payload satisfies the schema."""

    @property
    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    """The payload was rejected.

    Attributes:
        reasons: One description per violation, in the order reported by the checker
    """

    reasons: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return False


ValidationResult = Union[Valid, Invalid]


class StructuralValidator(Protocol):
    """Anything that can accept or reject a raw payload."""

    def validate(self, payload: bytes) -> ValidationResult:
        """Check a raw payload.

        Args:
            payload: Raw request body, not assumed to be well-formed JSON

        Returns:
            Valid, or Invalid carrying the violation descriptions
        """
        ...


class JsonSchemaValidator:
    """StructuralValidator backed by a compiled JSON Schema."""

    def __init__(self, schema: dict[str, Any]) -> None:
        """Compile a schema document.

        Args:
            schema: Parsed JSON Schema document

        Raises:
            SchemaLoadError: If the document is not a valid schema for its draft
        """
        cls = validator_for(schema)
        try:
            cls.check_schema(schema)
        except SchemaError as e:
            raise SchemaLoadError(f"Invalid samples schema: {e.message}") from e
        self.schema = schema
        self._validator: Validator = cls(schema)

    def validate(self, payload: bytes) -> ValidationResult:
        # Bodies are plain UTF-8 only. json.loads(bytes) would also sniff
        # UTF-16/32 and skip a BOM, which the sample decoder does not.
        try:
            instance = json.loads(payload.decode("utf-8"))
        except (ValueError, RecursionError):
            # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
            return Invalid([MALFORMED_JSON])

        reasons = [_describe(error) for error in self._validator.iter_errors(instance)]
        if reasons:
            return Invalid(reasons)
        return Valid()


def _describe(error: Any) -> str:
    if error.absolute_path:
        return f"{error.json_path}: {error.message}"
    return error.message


def load_samples_schema(
    path: Optional[Path] = None, max_samples: Optional[int] = None
) -> JsonSchemaValidator:
    """Load and compile the samples batch schema.

    Args:
        path: Schema document to load (defaults to the packaged samples.json)
        max_samples: Overrides the document's ``maxItems`` when given

    Returns:
        A compiled JsonSchemaValidator

    Raises:
        SchemaLoadError: If the file is missing, unreadable, or not a valid schema
    """
    schema_path = Path(path) if path is not None else DEFAULT_SAMPLES_SCHEMA_PATH
    try:
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SchemaLoadError(f"Cannot read samples schema {schema_path}: {e}") from e
    except ValueError as e:
        raise SchemaLoadError(f"Samples schema {schema_path} is not valid JSON: {e}") from e

    if not isinstance(schema, dict):
        raise SchemaLoadError(f"Samples schema {schema_path} must be a JSON object")

    if max_samples is not None:
        schema = copy.deepcopy(schema)
        schema["maxItems"] = max_samples

    validator = JsonSchemaValidator(schema)
    logger.info(
        "samples_schema_loaded",
        path=str(schema_path),
        max_items=schema.get("maxItems"),
    )
    return validator
