"""Formula engine for computed fields.

This module provides a small, safe formula language supporting:
- Arithmetic operations (+, -, *, /) and unary minus
- Comparison operations (==, !=, <, >, <=, >=)
- Number, string and boolean literals
- Field references ({fieldName})
- Text templates ("{name} the {class}") for text output

Formulas are parsed into an AST and reduced by a tree-walking evaluator;
field values are never spliced into formula text.
"""

from campaign_fields.formula.coercion import coerce
from campaign_fields.formula.dependencies import ComputedFieldGraph, extract_dependencies
from campaign_fields.formula.evaluator import (
    FormulaEvaluator,
    evaluate,
    evaluate_computed_field,
)
from campaign_fields.formula.examples import (
    DRAW_STEEL_EXAMPLES,
    EXAMPLE_CATEGORIES,
    ComputedFieldExample,
    ExampleCategory,
    get_examples_by_category,
)
from campaign_fields.formula.parser import FormulaParser
from campaign_fields.formula.tokens import Token, TokenKind, tokenize, tokenize_template
from campaign_fields.formula.types import (
    EvaluationError,
    OutputType,
    ValidationErrorKind,
    ValidationResult,
)
from campaign_fields.formula.validator import validate_formula

__all__ = [
    "ComputedFieldExample",
    "ComputedFieldGraph",
    "DRAW_STEEL_EXAMPLES",
    "EXAMPLE_CATEGORIES",
    "EvaluationError",
    "ExampleCategory",
    "FormulaEvaluator",
    "FormulaParser",
    "OutputType",
    "Token",
    "TokenKind",
    "ValidationErrorKind",
    "ValidationResult",
    "coerce",
    "evaluate",
    "evaluate_computed_field",
    "extract_dependencies",
    "get_examples_by_category",
    "tokenize",
    "tokenize_template",
    "validate_formula",
]
