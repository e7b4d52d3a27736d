"""Formula parser for computed fields.

Parses expression formulas into an AST using the Lark parser, and text
templates into a ``Concat`` node of literal fragments and field accesses.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Union

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput

from campaign_fields.core.exceptions import FormulaSyntaxError
from campaign_fields.formula.grammar import FORMULA_GRAMMAR
from campaign_fields.formula.tokens import TokenKind, describe_syntax_error, tokenize_template

logger = logging.getLogger(__name__)


# AST Node types
@dataclass(frozen=True)
class Literal:
    value: float | str | bool


@dataclass(frozen=True)
class FieldAccess:
    name: str


@dataclass(frozen=True)
class BinaryOp:
    operator: str
    left: "ExpressionNode"
    right: "ExpressionNode"


@dataclass(frozen=True)
class UnaryOp:
    operator: str
    operand: "ExpressionNode"


@dataclass(frozen=True)
class Concat:
    """Text template: literal fragments interleaved with field accesses."""

    parts: tuple[Union[Literal, FieldAccess], ...]


ExpressionNode = Union[Literal, FieldAccess, BinaryOp, UnaryOp, Concat]


class FormulaTransformer(Transformer):
    """Transform Lark parse tree into AST nodes."""

    @v_args(inline=True)
    def number(self, token):
        return Literal(float(token))

    @v_args(inline=True)
    def string(self, token):
        # Remove quotes
        return Literal(str(token)[1:-1])

    @v_args(inline=True)
    def boolean(self, token):
        return Literal(str(token).lower() == "true")

    @v_args(inline=True)
    def field_ref(self, token):
        # Extract field name from {fieldName}
        return FieldAccess(str(token)[1:-1])

    @v_args(inline=True)
    def binary(self, left, op, right):
        return BinaryOp(str(op), left, right)

    @v_args(inline=True)
    def unary_op(self, op, operand):
        return UnaryOp(str(op), operand)


@lru_cache(maxsize=1)
def _get_lark() -> Lark:
    # LALR with an inline transformer keeps no per-parse state
    return Lark(
        FORMULA_GRAMMAR,
        parser="lalr",
        transformer=FormulaTransformer(),
    )


class FormulaParser:
    """
    Parser for computed field formulas.

    Expression formulas go through the Lark grammar; text templates are
    split on field references and never interpreted as arithmetic.
    """

    def __init__(self):
        self._parser = _get_lark()

    def parse(self, formula: str) -> ExpressionNode:
        """
        Parse an expression formula into an AST.

        Args:
            formula: Formula string to parse

        Returns:
            AST root node

        Raises:
            FormulaSyntaxError: If formula syntax is invalid
        """
        if not formula.strip():
            raise FormulaSyntaxError("Formula is empty", formula, 0)
        try:
            return self._parser.parse(formula)
        except UnexpectedInput as e:
            error = describe_syntax_error(formula, e)
            logger.debug(
                "Formula failed to parse",
                extra={"formula": formula, "detail": error.detail},
            )
            raise error from e

    def parse_template(self, formula: str) -> Concat:
        """
        Parse a text template into a ``Concat`` node.

        Everything outside well-formed ``{identifier}`` spans is kept as
        literal text, including operator characters and ``|``.
        """
        parts: list[Union[Literal, FieldAccess]] = []
        for token in tokenize_template(formula):
            if token.kind is TokenKind.FIELD_REF:
                parts.append(FieldAccess(token.value))
            else:
                parts.append(Literal(token.value))
        return Concat(tuple(parts))

    def validate(self, formula: str) -> tuple[bool, str | None]:
        """
        Validate expression syntax without evaluating.

        Args:
            formula: Formula string to validate

        Returns:
            Tuple of (is_valid, error_message)
        """
        try:
            self.parse(formula)
            return True, None
        except FormulaSyntaxError as e:
            return False, e.detail

    def get_field_references(self, node: ExpressionNode) -> list[str]:
        """
        Collect field names referenced by an AST, in first-seen order.

        Args:
            node: Parsed formula

        Returns:
            Distinct field names
        """
        fields: list[str] = []
        self._collect_fields(node, fields)
        return list(dict.fromkeys(fields))

    def _collect_fields(self, node: Any, fields: list[str]) -> None:
        """Recursively collect field references from AST."""
        if isinstance(node, FieldAccess):
            fields.append(node.name)
        elif isinstance(node, BinaryOp):
            self._collect_fields(node.left, fields)
            self._collect_fields(node.right, fields)
        elif isinstance(node, UnaryOp):
            self._collect_fields(node.operand, fields)
        elif isinstance(node, Concat):
            for part in node.parts:
                self._collect_fields(part, fields)
