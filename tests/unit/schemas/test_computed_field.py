"""Unit tests for ComputedFieldConfig."""

import pytest
from pydantic import ValidationError

from campaign_fields.formula.types import OutputType
from campaign_fields.schemas.computed_field import ComputedFieldConfig


class TestComputedFieldConfig:
    """Tests for the computed field configuration schema."""

    def test_defaults(self):
        """Test an empty config."""
        config = ComputedFieldConfig()
        assert config.formula == ""
        assert config.output_type is OutputType.NUMBER
        assert config.dependencies == ()

    def test_dependencies_derived_from_formula(self):
        """Test that dependencies follow the formula."""
        config = ComputedFieldConfig(formula="{might} + {level} + {might}")
        assert config.dependencies == ("might", "level")

    def test_dependencies_input_ignored(self):
        """Test that supplied dependencies cannot disagree with the formula."""
        config = ComputedFieldConfig.model_validate(
            {"formula": "{a}", "dependencies": ["x", "y"], "outputType": "text"}
        )
        assert config.dependencies == ("a",)
        assert config.output_type is OutputType.TEXT

    def test_alias_and_field_name(self):
        """Test both spellings of the output type key."""
        assert ComputedFieldConfig(outputType="boolean").output_type is OutputType.BOOLEAN
        assert ComputedFieldConfig(output_type="text").output_type is OutputType.TEXT

    def test_unknown_output_type(self):
        """Test that only the three output types are accepted."""
        with pytest.raises(ValidationError):
            ComputedFieldConfig(formula="{a}", output_type="date")

    def test_frozen(self):
        """Test that configs are immutable."""
        config = ComputedFieldConfig(formula="{a}")
        with pytest.raises(ValidationError):
            config.formula = "{b}"

    def test_with_formula_rederives(self):
        """Test editing the formula re-derives dependencies."""
        config = ComputedFieldConfig(formula="{a}", output_type="text")
        edited = config.with_formula("{b} and {c}")
        assert edited.dependencies == ("b", "c")
        assert edited.output_type is OutputType.TEXT
        assert config.dependencies == ("a",)

    def test_with_output_type(self):
        """Test changing the output type keeps the formula."""
        config = ComputedFieldConfig(formula="{level} >= 5")
        edited = config.with_output_type(OutputType.BOOLEAN)
        assert edited.formula == "{level} >= 5"
        assert edited.output_type is OutputType.BOOLEAN

    def test_dump_uses_alias(self):
        """Test the stored shape."""
        config = ComputedFieldConfig(formula="{maxHP} / 3")
        assert config.model_dump(mode="json", by_alias=True) == {
            "formula": "{maxHP} / 3",
            "outputType": "number",
            "dependencies": ["maxHP"],
        }
