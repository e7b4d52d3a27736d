"""Conformance tests driven by the Draw Steel example catalog."""

import pytest

from campaign_fields.formula import (
    DRAW_STEEL_EXAMPLES,
    EXAMPLE_CATEGORIES,
    ExampleCategory,
    OutputType,
    evaluate,
    extract_dependencies,
    get_examples_by_category,
    validate_formula,
)

EXAMPLE_IDS = [example.name for example in DRAW_STEEL_EXAMPLES]


@pytest.mark.parametrize("example", DRAW_STEEL_EXAMPLES, ids=EXAMPLE_IDS)
class TestExampleCatalog:
    """Every catalog entry must behave as documented."""

    def test_expected_result(self, example):
        """Test the sample fields produce the expected result."""
        result = evaluate(example.formula, example.output_type, example.sample_fields)
        if example.output_type is OutputType.NUMBER:
            assert result == pytest.approx(example.expected_result, abs=0.01)
        else:
            assert result == example.expected_result

    def test_empty_fields_give_null(self, example):
        """Test that no field values yields None."""
        assert evaluate(example.formula, example.output_type, {}) is None

    def test_output_type_discipline(self, example):
        """Test the result has the declared type."""
        result = evaluate(example.formula, example.output_type, example.sample_fields)
        expected_type = {
            OutputType.NUMBER: float,
            OutputType.TEXT: str,
            OutputType.BOOLEAN: bool,
        }[example.output_type]
        assert type(result) is expected_type

    def test_validates(self, example):
        """Test the formula passes validation against its own sample fields."""
        result = validate_formula(
            example.formula,
            list(example.sample_fields),
            output_type=example.output_type,
        )
        assert result.is_valid, result.detail

    def test_sample_fields_cover_dependencies(self, example):
        """Test the sample map supplies every referenced field."""
        assert set(extract_dependencies(example.formula)) <= set(example.sample_fields)


class TestExampleCategories:
    """Tests for catalog grouping."""

    def test_at_least_thirteen_examples(self):
        """Test the catalog size."""
        assert len(DRAW_STEEL_EXAMPLES) >= 13

    def test_every_category_has_examples(self):
        """Test that no category is empty."""
        for category in EXAMPLE_CATEGORIES:
            assert get_examples_by_category(category)

    @pytest.mark.parametrize(
        "category,count",
        [
            (ExampleCategory.HEALTH, 4),
            (ExampleCategory.ABILITY_SCORES, 3),
            (ExampleCategory.DISPLAY, 3),
            (ExampleCategory.COMBAT, 2),
            (ExampleCategory.NEGOTIATION, 1),
        ],
    )
    def test_category_counts(self, category, count):
        """Test membership counts per category."""
        assert len(get_examples_by_category(category)) == count

    def test_lookup_by_label(self):
        """Test looking a category up by its display label."""
        examples = get_examples_by_category("Negotiation")
        assert [example.name for example in examples] == ["Negotiation Difficulty"]

    def test_unique_names(self):
        """Test example names are unique."""
        assert len(set(EXAMPLE_IDS)) == len(EXAMPLE_IDS)

    def test_sample_fields_are_read_only(self):
        """Test the catalog cannot be mutated through an example."""
        with pytest.raises(TypeError):
            DRAW_STEEL_EXAMPLES[0].sample_fields["maxHP"] = 1
