"""Unit tests for dependency extraction and ComputedFieldGraph."""

import pytest

from campaign_fields.formula.dependencies import ComputedFieldGraph, extract_dependencies


class TestExtractDependencies:
    """Tests for extract_dependencies."""

    def test_repeated_reference_collapses(self):
        """Test that duplicates collapse to one entry."""
        assert extract_dependencies("{a} + {a} * {a}") == ["a"]

    def test_no_references(self):
        """Test a literal-only formula."""
        assert extract_dependencies("42") == []

    def test_first_seen_order(self):
        """Test that order follows first occurrence."""
        assert extract_dependencies("{c} + {a} - {c} * {b}") == ["c", "a", "b"]

    def test_template_references(self):
        """Test references inside a text template."""
        assert extract_dependencies("{name} the {class}") == ["name", "class"]

    @pytest.mark.parametrize(
        "formula,expected",
        [
            ("{field1 + {field2}", ["field2"]),
            ("{a}}", ["a"]),
            ("{first name} {level}", ["level"]),
            ("{}", []),
        ],
    )
    def test_malformed_spans_are_skipped(self, formula, expected):
        """Test that only well-formed spans are collected."""
        assert extract_dependencies(formula) == expected

    def test_identifier_characters(self):
        """Test digits and underscores in names."""
        assert extract_dependencies("{max_hp_2} + {HP}") == ["max_hp_2", "HP"]


class TestComputedFieldGraph:
    """Tests for ComputedFieldGraph class."""

    def test_initialization(self):
        """Test that graph initializes correctly."""
        graph = ComputedFieldGraph()
        assert len(graph.dependencies) == 0
        assert len(graph.reverse) == 0

    def test_add_computed_field_no_deps(self):
        """Test adding a computed field with no dependencies."""
        graph = ComputedFieldGraph()
        success, error = graph.add_computed_field("total", set())
        assert success is True
        assert error is None
        assert graph.get_dependencies("total") == set()

    def test_add_computed_field_with_deps(self):
        """Test adding a computed field with dependencies."""
        graph = ComputedFieldGraph()
        success, error = graph.add_computed_field("total", {"might", "agility"})
        assert success is True
        assert error is None
        assert graph.get_dependencies("total") == {"might", "agility"}
        assert "total" in graph.dependencies["might"]
        assert "total" in graph.dependencies["agility"]

    def test_self_circular_reference(self):
        """Test detecting a self-referencing formula."""
        graph = ComputedFieldGraph()
        success, error = graph.add_computed_field("hp", {"hp"})
        assert success is False
        assert error == "Circular reference detected in formula dependencies"

    def test_direct_circular_reference(self):
        """Test detecting a direct circular reference (A -> B -> A)."""
        graph = ComputedFieldGraph()
        graph.add_computed_field("field_a", {"field_b"})
        success, error = graph.add_computed_field("field_b", {"field_a"})
        assert success is False
        assert error == "Circular reference detected in formula dependencies"

    def test_indirect_circular_reference(self):
        """Test detecting an indirect circular reference (A -> B -> C -> A)."""
        graph = ComputedFieldGraph()
        graph.add_computed_field("field_a", {"field_b"})
        graph.add_computed_field("field_b", {"field_c"})
        success, error = graph.add_computed_field("field_c", {"field_a"})
        assert success is False

    def test_rejected_field_leaves_graph_unchanged(self):
        """Test that a rejected update keeps the old edges."""
        graph = ComputedFieldGraph()
        graph.add_computed_field("field_a", {"field_b"})
        graph.add_computed_field("field_b", {"field_c"})
        graph.add_computed_field("field_b", {"field_a"})
        assert graph.get_dependencies("field_b") == {"field_c"}

    def test_update_replaces_edges(self):
        """Test that re-adding a field replaces its dependencies."""
        graph = ComputedFieldGraph()
        graph.add_computed_field("title", {"name", "class"})
        graph.add_computed_field("title", {"name"})
        assert graph.get_dependencies("title") == {"name"}
        assert graph.get_dependents("class") == set()

    def test_remove_computed_field(self):
        """Test removing a computed field."""
        graph = ComputedFieldGraph()
        graph.add_computed_field("total", {"might"})
        graph.remove_computed_field("total")
        assert graph.get_dependencies("total") == set()
        assert graph.get_dependents("might") == set()

    def test_get_affected_fields(self):
        """Test transitive dependents of a changed field."""
        graph = ComputedFieldGraph()
        graph.add_computed_field("remainingHP", {"maxHP", "currentDamage"})
        graph.add_computed_field("isBloodied", {"remainingHP", "maxHP"})
        graph.add_computed_field("title", {"name"})

        assert graph.get_affected_fields("maxHP") == ["isBloodied", "remainingHP"]
        assert graph.get_affected_fields("currentDamage") == ["remainingHP", "isBloodied"]
        assert graph.get_affected_fields("level") == []

    def test_get_evaluation_order(self):
        """Test topological ordering of computed fields."""
        graph = ComputedFieldGraph()
        graph.add_computed_field("remainingHP", {"maxHP", "currentDamage"})
        graph.add_computed_field("isBloodied", {"remainingHP", "maxHP"})
        graph.add_computed_field("label", {"isBloodied"})

        order = graph.get_evaluation_order({"label", "isBloodied", "remainingHP"})
        assert order == ["remainingHP", "isBloodied", "label"]

    def test_evaluation_order_ignores_outside_fields(self):
        """Test that fields outside the requested set do not block ordering."""
        graph = ComputedFieldGraph()
        graph.add_computed_field("b", {"a"})
        graph.add_computed_field("c", {"b"})
        assert graph.get_evaluation_order({"c"}) == ["c"]

    def test_evaluation_order_with_cycle(self):
        """Test that a loaded cycle yields an empty order."""
        graph = ComputedFieldGraph.from_dependencies({"a": ["b"], "b": ["a"]})
        assert graph.get_evaluation_order({"a", "b"}) == []

    def test_from_dependencies(self):
        """Test building a graph from a mapping."""
        graph = ComputedFieldGraph.from_dependencies(
            {"remainingHP": ["maxHP", "currentDamage"], "isBloodied": ("remainingHP",)}
        )
        assert graph.get_dependencies("isBloodied") == {"remainingHP"}
        assert graph.detect_circular_reference("remainingHP", {"isBloodied"}) is True
        assert graph.detect_circular_reference("remainingHP", {"maxHP"}) is False

    def test_clear(self):
        """Test clearing the graph."""
        graph = ComputedFieldGraph()
        graph.add_computed_field("total", {"might"})
        graph.clear()
        assert len(graph.dependencies) == 0
        assert len(graph.reverse) == 0

    def test_repr(self):
        """Test string representation."""
        graph = ComputedFieldGraph()
        graph.add_computed_field("total", {"might", "agility"})
        assert repr(graph) == "ComputedFieldGraph(fields=1, edges=2)"
