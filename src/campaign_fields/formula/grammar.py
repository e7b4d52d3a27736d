"""Lark grammar definition for computed field formulas.

This grammar supports:
- Arithmetic: +, -, *, / and unary minus/plus
- Comparison: ==, !=, <, >, <=, >=
- Grouping with parentheses
- Field references: {fieldName}
- Literals: numbers, strings, booleans

There are no identifiers, function calls or assignment; anything outside
the terminals below is a syntax error.
"""

# Lark grammar for expression formulas (number and boolean output)
FORMULA_GRAMMAR = r"""
    ?start: comparison

    ?comparison: additive
        | comparison COMP_OP additive -> binary

    ?additive: multiplicative
        | additive ADD_OP multiplicative -> binary

    ?multiplicative: unary
        | multiplicative MUL_OP unary -> binary

    ?unary: atom
        | ADD_OP unary -> unary_op

    ?atom: NUMBER -> number
        | STRING -> string
        | BOOLEAN -> boolean
        | FIELD_REF -> field_ref
        | _LPAR comparison _RPAR

    // Longest operators first so "<=" never lexes as "<" "="
    COMP_OP: /<=|>=|==|!=|<|>/
    ADD_OP: /[+-]/
    MUL_OP: /[*\/]/

    _LPAR: "("
    _RPAR: ")"

    BOOLEAN.2: /(true|false)\b/i

    // Field reference: {identifier}
    FIELD_REF: /\{[A-Za-z0-9_]+\}/

    // String literals (single or double quotes)
    STRING: /"[^"]*"/ | /'[^']*'/

    // Number literals (integer or decimal, with optional scientific notation)
    // Note: negative sign is handled by unary operator, not here
    NUMBER: /(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?/

    %import common.WS
    %ignore WS
"""

# Characters that mark a formula as an expression rather than a text template
EXPRESSION_CHARACTERS = frozenset("+-*/<>=!()")

# Pattern for a well-formed field reference inside a formula
FIELD_REF_PATTERN = r"\{([A-Za-z0-9_]+)\}"

# Text a field may hold and still count as a number: the NUMBER terminal
# with an optional sign
NUMERIC_TEXT_PATTERN = r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?"
