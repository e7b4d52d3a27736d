"""Computed field type handler.

Computed fields derive their value from a formula over other fields of the
same entity. The stored configuration is a ComputedFieldConfig; values are
produced on render and never entered by the user.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from campaign_fields.core.exceptions import InvalidFormulaError
from campaign_fields.fields.base import BaseFieldTypeHandler
from campaign_fields.formula.coercion import format_number, is_number
from campaign_fields.formula.evaluator import evaluate_computed_field
from campaign_fields.formula.types import EvaluationError, EvaluationResult, FieldValueMap
from campaign_fields.formula.validator import validate_formula
from campaign_fields.schemas.computed_field import ComputedFieldConfig


class ComputedFieldHandler(BaseFieldTypeHandler):
    """
    Handler for computed fields.

    Options:
        known_fields: Names of the fields a formula may reference
        field_name: Name of the computed field itself (self-reference check)
        computed_dependencies: Dependencies of the entity type's other
            computed fields (cycle check)
        precision: Decimal places when displaying numeric results (default: 2)
    """

    field_type = "computed"

    @classmethod
    def serialize(cls, value: Any) -> Any:
        """
        Serialize a computed field configuration for storage.

        Args:
            value: ComputedFieldConfig or a mapping in its shape

        Returns:
            JSON-serializable dict using the ``outputType`` key
        """
        if value is None:
            return None
        config = cls.deserialize(value)
        return config.model_dump(mode="json", by_alias=True)

    @classmethod
    def deserialize(cls, value: Any) -> ComputedFieldConfig:
        """
        Build a ComputedFieldConfig from stored data.

        Stored ``dependencies`` are discarded and re-derived from the formula.

        Raises:
            InvalidFormulaError: If the data is not a computed field config
        """
        if isinstance(value, ComputedFieldConfig):
            return value
        try:
            return ComputedFieldConfig.model_validate(value)
        except PydanticValidationError as e:
            raise InvalidFormulaError(
                "invalid_config",
                f"Malformed computed field configuration: {e.error_count()} error(s)",
            ) from e

    @classmethod
    def validate(cls, value: Any, options: dict[str, Any] | None = None) -> bool:
        """
        Validate a computed field configuration.

        Args:
            value: ComputedFieldConfig or a mapping in its shape
            options: See class docstring

        Returns:
            True if valid

        Raises:
            InvalidFormulaError: If the configuration or its formula is invalid
        """
        options = options or {}
        config = cls.deserialize(value)

        known_fields: Iterable[str] | None = options.get("known_fields")
        computed_dependencies: Mapping[str, Iterable[str]] | None = options.get(
            "computed_dependencies"
        )
        result = validate_formula(
            config.formula,
            known_fields,
            options.get("field_name"),
            output_type=config.output_type,
            computed_dependencies=computed_dependencies,
        )
        if not result.is_valid:
            raise InvalidFormulaError(result.kind.value, result.detail, result.field_name)

        return True

    @classmethod
    def default(cls) -> Any:
        """
        Get default value.

        Computed fields have no value until evaluated.

        Returns:
            None
        """
        return None

    @classmethod
    def compute(cls, config: Any, fields: FieldValueMap) -> EvaluationResult:
        """
        Compute the field's value for one entity.

        Args:
            config: ComputedFieldConfig or a mapping in its shape
            fields: The entity's current field values

        Returns:
            Value, None for missing dependencies, or EvaluationError
        """
        try:
            config = cls.deserialize(config)
        except InvalidFormulaError as e:
            return EvaluationError(e.message)
        return evaluate_computed_field(config, fields)

    @classmethod
    def format_display(cls, value: Any, options: dict[str, Any] | None = None) -> str:
        """
        Format a computed result for display.

        Args:
            value: Result of ``compute``
            options: Field options

        Returns:
            Formatted display string
        """
        if value is None:
            return ""

        if isinstance(value, EvaluationError):
            return f"Error: {value.message}"

        if isinstance(value, bool):
            return "Yes" if value else "No"

        if is_number(value):
            precision = (options or {}).get("precision", 2)
            if precision is None or not math.isfinite(value) or float(value).is_integer():
                return format_number(value)
            return f"{value:.{precision}f}"

        return str(value)

    @classmethod
    def is_computed(cls) -> bool:
        """
        Indicate that this is a computed field type.

        Returns:
            True (computed fields are always derived)
        """
        return True

    @classmethod
    def is_read_only(cls) -> bool:
        """
        Indicate that this field type is read-only.

        Returns:
            True (computed fields cannot be directly edited)
        """
        return True
