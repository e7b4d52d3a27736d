"""Static validation of computed field formulas.

Runs on every keystroke in the field editor, so every check is a pure
function of its arguments and failures are returned, not raised.
"""

import re
from collections.abc import Iterable, Mapping

from campaign_fields.core.config import settings
from campaign_fields.core.exceptions import FormulaSyntaxError
from campaign_fields.core.logging import get_logger
from campaign_fields.formula.dependencies import ComputedFieldGraph, extract_dependencies
from campaign_fields.formula.grammar import EXPRESSION_CHARACTERS, FIELD_REF_PATTERN
from campaign_fields.formula.parser import FormulaParser
from campaign_fields.formula.tokens import tokenize
from campaign_fields.formula.types import OutputType, ValidationErrorKind, ValidationResult

logger = get_logger(__name__)

_FIELD_REF_RE = re.compile(FIELD_REF_PATTERN)
_BRACED_SPAN_RE = re.compile(r"\{([^{}]*)\}")


def find_unmatched_brace(formula: str) -> int | None:
    """
    Index of the first brace without a partner, or None if balanced.

    Field references do not nest, so a ``{`` opened while another is still
    open is itself unmatched.
    """
    open_at: int | None = None
    for index, char in enumerate(formula):
        if char == "{":
            if open_at is not None:
                return open_at
            open_at = index
        elif char == "}":
            if open_at is None:
                return index
            open_at = None
    return open_at


def is_expression_formula(formula: str, output_type: OutputType | str | None = None) -> bool:
    """
    Decide whether a formula is an expression or a text template.

    Text output is always a template. Without an output type, a formula is
    an expression when operator or parenthesis characters appear outside
    its field references.
    """
    if output_type is not None:
        return OutputType(output_type) is not OutputType.TEXT
    outside_refs = _FIELD_REF_RE.sub("", formula)
    return any(char in EXPRESSION_CHARACTERS for char in outside_refs)


def _check_syntax(formula: str, expression: bool) -> str | None:
    """Return a syntax error detail, or None if well formed."""
    if expression:
        try:
            tokenize(formula)
            FormulaParser().parse(formula)
        except FormulaSyntaxError as e:
            return e.detail
        return None

    for match in _BRACED_SPAN_RE.finditer(formula):
        if not _FIELD_REF_RE.fullmatch(match.group(0)):
            return (
                f"Malformed field reference '{match.group(0)}'; "
                "field names may only contain letters, digits and underscores"
            )
    return None


def validate_formula(
    formula: str,
    known_fields: Iterable[str] | None = None,
    self_field_name: str | None = None,
    *,
    output_type: OutputType | str | None = None,
    computed_dependencies: Mapping[str, Iterable[str]] | None = None,
) -> ValidationResult:
    """
    Validate a formula without evaluating it.

    Checks run in order and the first failure is reported: brace balance,
    unknown field references, well-formedness, circular references.

    Args:
        formula: Formula text
        known_fields: Names of the fields the formula may reference
        self_field_name: Name of the computed field being edited
        output_type: Declared output type, selects expression or template
            parsing; guessed from the formula when omitted
        computed_dependencies: Dependencies of the entity type's other
            computed fields, for cycle detection across fields

    Returns:
        ValidationResult
    """
    if len(formula) > settings.formula_max_length:
        return ValidationResult.invalid(
            ValidationErrorKind.SYNTAX_ERROR,
            f"Formula is longer than {settings.formula_max_length} characters",
        )

    unmatched = find_unmatched_brace(formula)
    if unmatched is not None:
        return ValidationResult.invalid(
            ValidationErrorKind.UNMATCHED_BRACE,
            f"Unmatched '{formula[unmatched]}' at position {unmatched + 1}",
        )

    dependencies = extract_dependencies(formula)

    if known_fields is not None:
        known = set(known_fields)
        for name in dependencies:
            if name not in known:
                return ValidationResult.invalid(
                    ValidationErrorKind.UNKNOWN_FIELD,
                    f"Unknown field '{name}'",
                    field_name=name,
                )

    detail = _check_syntax(formula, is_expression_formula(formula, output_type))
    if detail is not None:
        return ValidationResult.invalid(ValidationErrorKind.SYNTAX_ERROR, detail)

    if self_field_name is not None:
        if self_field_name in dependencies:
            return ValidationResult.invalid(
                ValidationErrorKind.CIRCULAR_REFERENCE,
                f"Formula references its own field '{self_field_name}'",
                field_name=self_field_name,
            )

        if computed_dependencies:
            others = {
                name: deps
                for name, deps in computed_dependencies.items()
                if name != self_field_name
            }
            graph = ComputedFieldGraph.from_dependencies(others)
            if graph.detect_circular_reference(self_field_name, set(dependencies)):
                logger.debug(
                    "Circular computed field dependency",
                    extra={"field": self_field_name, "dependencies": dependencies},
                )
                return ValidationResult.invalid(
                    ValidationErrorKind.CIRCULAR_REFERENCE,
                    f"Formula creates a circular dependency through '{self_field_name}'",
                    field_name=self_field_name,
                )

    return ValidationResult.valid()
