"""Computed field dependency tracking.

Extracts the fields a formula references and tracks dependencies between
the computed fields of an entity type for recalculation and circular
reference detection.
"""

import re
from collections import defaultdict, deque
from collections.abc import Iterable, Mapping

from campaign_fields.formula.grammar import FIELD_REF_PATTERN

_FIELD_REF_RE = re.compile(FIELD_REF_PATTERN)


def extract_dependencies(formula: str) -> list[str]:
    """
    Extract the field names a formula references.

    Best effort: only well-formed ``{identifier}`` spans count, unbalanced
    braces are ignored here and reported by the validator.

    Args:
        formula: Formula string

    Returns:
        Distinct field names in order of first occurrence
    """
    return list(dict.fromkeys(_FIELD_REF_RE.findall(formula)))


class ComputedFieldGraph:
    """
    Track computed field dependencies for recalculation.

    Maintains a bidirectional graph of field dependencies:
    - dependencies: field -> set of computed fields that depend on this field
    - reverse: computed field -> set of fields it depends on
    """

    def __init__(self):
        """Initialize empty dependency graph."""
        # If field A changes, every field in dependencies[A] needs recalculation
        self.dependencies: dict[str, set[str]] = defaultdict(set)

        # To calculate field A, we need every field in reverse[A]
        self.reverse: dict[str, set[str]] = defaultdict(set)

    @classmethod
    def from_dependencies(cls, graph: Mapping[str, Iterable[str]]) -> "ComputedFieldGraph":
        """
        Build a graph from a computed field -> referenced fields mapping.

        Edges are loaded as given, without cycle checks, so an existing
        cycle among the supplied fields is still visible to
        ``detect_circular_reference``.
        """
        instance = cls()
        for field_name, depends_on in graph.items():
            instance._set_edges(field_name, set(depends_on))
        return instance

    def add_computed_field(
        self, field_name: str, depends_on: set[str]
    ) -> tuple[bool, str | None]:
        """
        Add a computed field to the dependency graph.

        Args:
            field_name: Name of the computed field
            depends_on: Set of field names its formula references

        Returns:
            Tuple of (success, error_message)
        """
        if self.detect_circular_reference(field_name, depends_on):
            return False, "Circular reference detected in formula dependencies"

        self._set_edges(field_name, depends_on)
        return True, None

    def _set_edges(self, field_name: str, depends_on: set[str]) -> None:
        # Replace any previous edges of this field
        if field_name in self.reverse:
            for old_dep in self.reverse[field_name]:
                self.dependencies[old_dep].discard(field_name)

        self.reverse[field_name] = depends_on.copy()
        for dep in depends_on:
            self.dependencies[dep].add(field_name)

    def remove_computed_field(self, field_name: str) -> None:
        """
        Remove a computed field from the dependency graph.

        Args:
            field_name: Name of the computed field to remove
        """
        if field_name in self.reverse:
            for dep in self.reverse[field_name]:
                self.dependencies[dep].discard(field_name)
            del self.reverse[field_name]

        self.dependencies.pop(field_name, None)

    def get_affected_fields(self, changed_field: str) -> list[str]:
        """
        Get computed fields that need re-evaluation when a field changes.

        Uses BFS to traverse the dependency tree and find all
        transitive dependents of the changed field.

        Args:
            changed_field: Name of the field that changed

        Returns:
            Names of computed fields to re-evaluate, nearest first
        """
        affected = []
        to_process = deque([changed_field])
        seen = set()

        while to_process:
            current = to_process.popleft()

            if current in seen:
                continue
            seen.add(current)

            for dependent in sorted(self.dependencies.get(current, ())):
                if dependent not in seen:
                    affected.append(dependent)
                    to_process.append(dependent)

        return list(dict.fromkeys(affected))

    def get_evaluation_order(self, field_names: set[str]) -> list[str]:
        """
        Get evaluation order for several computed fields.

        Uses topological sort (Kahn's algorithm) so that a computed field
        is evaluated after the computed fields it reads.

        Args:
            field_names: Computed fields to evaluate

        Returns:
            Ordered list of field names, or empty list if cycle detected
        """
        in_degree = {name: 0 for name in field_names}
        queue = deque()

        for name in field_names:
            for dep in self.reverse.get(name, ()):
                if dep in field_names:
                    in_degree[name] += 1

        for name in sorted(field_names):
            if in_degree[name] == 0:
                queue.append(name)

        result = []
        while queue:
            name = queue.popleft()
            result.append(name)

            for dependent in sorted(self.dependencies.get(name, ())):
                if dependent in in_degree:
                    in_degree[dependent] -= 1
                    if in_degree[dependent] == 0:
                        queue.append(dependent)

        if len(result) != len(field_names):
            # Cycle detected
            return []

        return result

    def detect_circular_reference(self, field_name: str, depends_on: set[str]) -> bool:
        """
        Check if giving ``field_name`` these dependencies would create a cycle.

        Uses DFS over the existing edges, ignoring the field's own current
        edges since they are about to be replaced.

        Args:
            field_name: Computed field being added/updated
            depends_on: Set of field names its formula references

        Returns:
            True if circular reference detected
        """
        if not depends_on:
            return False

        if field_name in depends_on:
            return True

        visited = set()
        to_check = list(depends_on)

        while to_check:
            current = to_check.pop()

            if current == field_name:
                return True

            if current in visited:
                continue
            visited.add(current)

            to_check.extend(self.reverse.get(current, ()))

        return False

    def get_dependencies(self, field_name: str) -> set[str]:
        """
        Get direct dependencies of a computed field.

        Args:
            field_name: Name of the computed field

        Returns:
            Set of field names it depends on
        """
        return set(self.reverse.get(field_name, ()))

    def get_dependents(self, field_name: str) -> set[str]:
        """
        Get direct dependents of a field.

        Args:
            field_name: Name of the field

        Returns:
            Set of computed field names that depend on this field
        """
        return set(self.dependencies.get(field_name, ()))

    def clear(self) -> None:
        """Clear all dependencies from the graph."""
        self.dependencies.clear()
        self.reverse.clear()

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"ComputedFieldGraph("
            f"fields={len(self.reverse)}, "
            f"edges={sum(len(deps) for deps in self.dependencies.values())})"
        )
