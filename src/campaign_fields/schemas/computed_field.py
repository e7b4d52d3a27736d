"""Computed field configuration schema."""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from campaign_fields.formula.dependencies import extract_dependencies
from campaign_fields.formula.types import OutputType


class ComputedFieldConfig(BaseModel):
    """
    Configuration of a computed field.

    ``dependencies`` is derived from ``formula`` on every access and cannot
    be set; a ``dependencies`` key in the input is ignored. Instances are
    immutable; use ``with_formula`` to edit.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    formula: str = Field(default="", description="Formula text with {field} references")
    output_type: OutputType = Field(
        default=OutputType.NUMBER,
        alias="outputType",
        description="Declared result type",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def dependencies(self) -> tuple[str, ...]:
        """Fields referenced by the formula, first occurrence first."""
        return tuple(extract_dependencies(self.formula))

    def with_formula(self, formula: str) -> "ComputedFieldConfig":
        """Copy of this config with new formula text."""
        return ComputedFieldConfig(formula=formula, output_type=self.output_type)

    def with_output_type(self, output_type: OutputType | str) -> "ComputedFieldConfig":
        """Copy of this config with a different output type."""
        return ComputedFieldConfig(formula=self.formula, output_type=output_type)
