"""Formula evaluator for computed fields.

Reduces parsed formula ASTs against a record's field values. Field values
are read from the AST, never substituted into formula text.
"""

import math
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from campaign_fields.core.exceptions import FormulaEvaluationError, FormulaSyntaxError
from campaign_fields.core.logging import get_logger
from campaign_fields.formula.coercion import coerce, is_number, stringify
from campaign_fields.formula.dependencies import extract_dependencies
from campaign_fields.formula.grammar import NUMERIC_TEXT_PATTERN
from campaign_fields.formula.parser import (
    BinaryOp,
    Concat,
    FieldAccess,
    FormulaParser,
    Literal,
    UnaryOp,
)
from campaign_fields.formula.types import (
    EvaluationError,
    EvaluationResult,
    FieldValueMap,
    OutputType,
)

if TYPE_CHECKING:
    from campaign_fields.schemas.computed_field import ComputedFieldConfig

logger = get_logger(__name__)

_NUMERIC_TEXT_RE = re.compile(NUMERIC_TEXT_PATTERN)

_parser: FormulaParser | None = None


def _get_parser() -> FormulaParser:
    """Lazy load parser so importing the package does not build the grammar."""
    global _parser
    if _parser is None:
        _parser = FormulaParser()
    return _parser


def _numeric_text(value: str) -> float | None:
    """Number spelled by a text value, or None; no underscores, nan or infinity."""
    text = value.strip()
    if not _NUMERIC_TEXT_RE.fullmatch(text):
        return None
    return float(text)


class FormulaEvaluator:
    """
    Evaluates formula ASTs against record data.

    The caller guarantees every referenced field is present; operand type
    problems raise FormulaEvaluationError.
    """

    def __init__(self, fields: FieldValueMap | None = None):
        """
        Initialize evaluator with optional field values.

        Args:
            fields: Dictionary mapping field names to their values
        """
        self._fields = fields or {}

    def evaluate(self, ast: Any, fields: FieldValueMap | None = None) -> Any:
        """
        Evaluate an AST node.

        Args:
            ast: AST node to evaluate
            fields: Optional field values (overrides constructor values)

        Returns:
            Evaluation result
        """
        if fields is not None:
            self._fields = fields

        return self._eval(ast)

    def _eval(self, node: Any) -> Any:
        """Recursively evaluate an AST node."""
        if isinstance(node, Literal):
            return node.value

        if isinstance(node, FieldAccess):
            return self._field_value(node.name)

        if isinstance(node, BinaryOp):
            return self._eval_binary(node)

        if isinstance(node, UnaryOp):
            return self._eval_unary(node)

        if isinstance(node, Concat):
            return "".join(stringify(self._eval(part)) for part in node.parts)

        raise FormulaEvaluationError(f"Unsupported expression node: {type(node).__name__}")

    def _field_value(self, name: str) -> Any:
        if name not in self._fields or self._fields[name] is None:
            raise FormulaEvaluationError(f"Field '{name}' has no value")
        value = self._fields[name]
        if not isinstance(value, (int, float, str, bool)):
            raise FormulaEvaluationError(
                f"Field '{name}' holds an unsupported value of type {type(value).__name__}"
            )
        return value

    def _eval_binary(self, node: BinaryOp) -> Any:
        """Evaluate a binary operation."""
        left = self._eval(node.left)
        right = self._eval(node.right)
        op = node.operator

        # Arithmetic operators
        if op == "+":
            return self._add(left, right)
        if op == "-":
            return self._to_number(left, op) - self._to_number(right, op)
        if op == "*":
            return self._to_number(left, op) * self._to_number(right, op)
        if op == "/":
            return self._divide(self._to_number(left, op), self._to_number(right, op))

        # Comparison operators
        if op == "==":
            return self._equal(left, right)
        if op == "!=":
            return not self._equal(left, right)
        if op in ("<", ">", "<=", ">="):
            return self._compare(op, left, right)

        raise FormulaEvaluationError(f"Unknown operator: {op}", operator=op)

    def _eval_unary(self, node: UnaryOp) -> float:
        """Evaluate a unary operation."""
        operand = self._to_number(self._eval(node.operand), node.operator)
        if node.operator == "-":
            return -operand
        return operand

    # ==========================================================================
    # Operator Implementations
    # ==========================================================================

    def _to_number(self, value: Any, op: str) -> float:
        """Numeric operand; text that spells a number is accepted."""
        if isinstance(value, bool):
            raise FormulaEvaluationError(
                f"Cannot use a boolean with '{op}'", operator=op
            )
        if is_number(value):
            try:
                return float(value)
            except OverflowError:
                raise FormulaEvaluationError(
                    "Number is too large to calculate with", operator=op
                ) from None
        number = _numeric_text(value)
        if number is None:
            raise FormulaEvaluationError(
                f"Cannot use text '{value}' with '{op}'", operator=op
            )
        return number

    def _add(self, left: Any, right: Any) -> Any:
        """Addition; concatenation when either side is text that is not a number."""
        if isinstance(left, str) or isinstance(right, str):
            numbers = [self._addend(value) for value in (left, right)]
            if None in numbers:
                return stringify(left) + stringify(right)
            return numbers[0] + numbers[1]
        return self._to_number(left, "+") + self._to_number(right, "+")

    def _addend(self, value: Any) -> float | None:
        """Numeric value of a '+' operand, or None when it is text or a boolean."""
        if isinstance(value, str):
            return _numeric_text(value)
        if isinstance(value, bool):
            return None
        return self._to_number(value, "+")

    def _divide(self, left: float, right: float) -> float:
        """IEEE division: x/0 is +/-Infinity and 0/0 is NaN."""
        if right == 0:
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)
        return left / right

    def _equal(self, left: Any, right: Any) -> bool:
        """Structural equality; numbers compare by value."""
        if is_number(left) and is_number(right):
            return left == right
        if type(left) is not type(right):
            return False
        return left == right

    def _compare(self, op: str, left: Any, right: Any) -> bool:
        """Ordering comparison of two numbers or two strings."""
        if isinstance(left, str) and isinstance(right, str):
            pair = (left, right)
        else:
            pair = (self._to_number(left, op), self._to_number(right, op))

        if op == "<":
            return pair[0] < pair[1]
        if op == ">":
            return pair[0] > pair[1]
        if op == "<=":
            return pair[0] <= pair[1]
        return pair[0] >= pair[1]


def find_missing_fields(formula: str, fields: FieldValueMap) -> list[str]:
    """Referenced fields that are absent from ``fields`` or None."""
    return [name for name in extract_dependencies(formula) if fields.get(name) is None]


def evaluate(
    formula: str,
    output_type: OutputType | str,
    fields: FieldValueMap | None,
    *,
    allow_non_finite: bool | None = None,
) -> EvaluationResult:
    """
    Evaluate a formula against field values.

    Args:
        formula: Formula text
        output_type: Declared output type; text formulas are templates,
            number and boolean formulas are expressions
        fields: Current field values
        allow_non_finite: Passed to the output coercer

    Returns:
        The typed value, None when a referenced field has no value, or an
        EvaluationError for a formula that cannot be reduced
    """
    try:
        output_type = OutputType(output_type)
    except ValueError:
        return EvaluationError(f"Unknown output type: {output_type}")

    fields = fields if fields is not None else {}
    if not isinstance(fields, Mapping):
        return EvaluationError("Field values must be a mapping of field name to value")

    missing = find_missing_fields(formula, fields)
    if missing:
        logger.debug("Formula has missing dependencies", extra={"missing": missing})
        return None

    if not formula.strip() and output_type is not OutputType.TEXT:
        raw: Any = ""
    else:
        parser = _get_parser()
        try:
            if output_type is OutputType.TEXT:
                ast = parser.parse_template(formula)
            else:
                ast = parser.parse(formula)
            raw = FormulaEvaluator(fields).evaluate(ast)
        except FormulaSyntaxError as e:
            return EvaluationError(f"Invalid formula: {e.detail}")
        except FormulaEvaluationError as e:
            logger.debug(
                "Formula evaluation failed",
                extra={"formula": formula, "detail": e.detail},
            )
            return EvaluationError(e.detail)
        except RecursionError:
            return EvaluationError("Formula is nested too deeply")

    return coerce(raw, output_type, allow_non_finite=allow_non_finite)


def evaluate_computed_field(
    config: "ComputedFieldConfig",
    fields: FieldValueMap | None,
) -> EvaluationResult:
    """
    Evaluate a computed field configuration.

    Args:
        config: The computed field configuration
        fields: The field values to use in the formula

    Returns:
        The computed result converted to the configured output type, None
        if dependencies are missing, or an EvaluationError
    """
    return evaluate(config.formula, config.output_type, fields)
