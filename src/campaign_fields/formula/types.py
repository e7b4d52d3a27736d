"""Value types shared by the formula engine and its callers."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Union

# A concrete value a field can hold; None marks the field as missing
FieldValue = Union[int, float, str, bool]
FieldValueMap = Mapping[str, Union[FieldValue, None]]


class OutputType(str, Enum):
    """Declared result kind of a computed field."""

    NUMBER = "number"
    TEXT = "text"
    BOOLEAN = "boolean"


class ValidationErrorKind(str, Enum):
    """Why a formula failed validation."""

    UNMATCHED_BRACE = "unmatched_brace"
    UNKNOWN_FIELD = "unknown_field"
    SYNTAX_ERROR = "syntax_error"
    CIRCULAR_REFERENCE = "circular_reference"


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a formula.

    A valid result has no ``kind``. Invalid results carry the failure kind,
    a message suitable for inline display, and for ``unknown_field`` and
    ``circular_reference`` the offending field name.
    """

    kind: ValidationErrorKind | None = None
    detail: str | None = None
    field_name: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.kind is None

    def __bool__(self) -> bool:
        return self.is_valid

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def invalid(
        cls,
        kind: ValidationErrorKind,
        detail: str,
        field_name: str | None = None,
    ) -> "ValidationResult":
        return cls(kind=kind, detail=detail, field_name=field_name)


@dataclass(frozen=True)
class EvaluationError:
    """Returned in place of a value when a formula cannot be reduced."""

    message: str

    def __str__(self) -> str:
        return self.message


# What evaluation hands back to a caller
EvaluationResult = Union[FieldValue, EvaluationError, None]
