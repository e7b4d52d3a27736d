"""Output coercion for computed field results.

Checks that a reduced value agrees with the field's declared output type.
Only text output converts; number and boolean output reject mismatches
instead of casting them.
"""

import math
from typing import Any

from campaign_fields.core.config import settings
from campaign_fields.formula.types import EvaluationError, EvaluationResult, OutputType


def is_number(value: Any) -> bool:
    """True for ints and floats; bool is excluded even though it subclasses int."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value: float | int) -> str:
    """Render a number the way a formula author expects to read it."""
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def stringify(value: Any) -> str:
    """Default string form of a formula value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    return str(value)


def _type_name(value: Any) -> str:
    if isinstance(value, bool):
        return "a boolean"
    if is_number(value):
        return "a number"
    if isinstance(value, str):
        return "text"
    return type(value).__name__


def coerce(
    raw: Any,
    output_type: OutputType | str,
    *,
    allow_non_finite: bool | None = None,
) -> EvaluationResult:
    """
    Convert a reduced formula value to the declared output type.

    Args:
        raw: Value produced by the evaluator
        output_type: Declared output type
        allow_non_finite: Whether Infinity/NaN are acceptable numbers.
            Defaults to the ``reject_non_finite_numbers`` setting.

    Returns:
        The coerced value, or an EvaluationError on type mismatch
    """
    output_type = OutputType(output_type)

    if output_type is OutputType.TEXT:
        return stringify(raw)

    if output_type is OutputType.NUMBER:
        if not is_number(raw):
            return EvaluationError(
                f"Formula produced {_type_name(raw)} but the field expects a number"
            )
        try:
            result = float(raw)
        except OverflowError:
            return EvaluationError("Formula produced a number too large for a number field")
        if not math.isfinite(result):
            if allow_non_finite is None:
                allow_non_finite = not settings.reject_non_finite_numbers
            if not allow_non_finite:
                return EvaluationError(
                    f"Formula produced {format_number(result)}; check for division by zero"
                )
        return result

    if not isinstance(raw, bool):
        return EvaluationError(
            f"Formula produced {_type_name(raw)} but the field expects a boolean"
        )
    return raw
