"""Formula tokenizer.

Expression formulas are lexed with the same Lark terminals the parser uses,
so the token stream a caller sees (for highlighting or diagnostics) always
agrees with what the parser accepts. Text templates are split into literal
text and field references.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from campaign_fields.core.exceptions import FormulaSyntaxError
from campaign_fields.formula.grammar import FIELD_REF_PATTERN, FORMULA_GRAMMAR

_FIELD_REF_RE = re.compile(FIELD_REF_PATTERN)
_WORD_RE = re.compile(r"[^\W\d][\w.]*")


class TokenKind(str, Enum):
    FIELD_REF = "field_ref"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    OPERATOR = "operator"
    LPAREN = "lparen"
    RPAREN = "rparen"
    TEXT = "text"


# Lark terminal name -> token kind
_TERMINAL_KINDS = {
    "FIELD_REF": TokenKind.FIELD_REF,
    "NUMBER": TokenKind.NUMBER,
    "STRING": TokenKind.STRING,
    "BOOLEAN": TokenKind.BOOLEAN,
    "COMP_OP": TokenKind.OPERATOR,
    "ADD_OP": TokenKind.OPERATOR,
    "MUL_OP": TokenKind.OPERATOR,
    "_LPAR": TokenKind.LPAREN,
    "_RPAR": TokenKind.RPAREN,
}


@dataclass(frozen=True)
class Token:
    """
    A lexical unit of a formula.

    ``value`` holds the decoded payload: the field name for references, a
    float for numbers, the unquoted text for strings, a bool for booleans
    and the operator symbol for operators.
    """

    kind: TokenKind
    text: str
    position: int
    value: Any = None


@lru_cache(maxsize=1)
def get_lexer() -> Lark:
    """Grammar instance used only for lexing."""
    return Lark(FORMULA_GRAMMAR, parser="lalr")


def describe_syntax_error(formula: str, error: UnexpectedInput) -> FormulaSyntaxError:
    """Turn a Lark error into a message a formula author can act on."""
    if isinstance(error, UnexpectedCharacters):
        pos = error.pos_in_stream
        char = formula[pos]
        if char in "\"'":
            detail = f"Unterminated string literal starting at position {pos + 1}"
        elif char in "{}":
            detail = (
                f"Malformed field reference at position {pos + 1}; "
                "field names may only contain letters, digits and underscores"
            )
        elif _WORD_RE.match(formula, pos):
            word = _WORD_RE.match(formula, pos).group(0)
            following = formula[pos + len(word):].lstrip()
            if following.startswith("("):
                detail = f"Function calls are not allowed: '{word}'"
            else:
                detail = (
                    f"Unexpected word '{word}' at position {pos + 1}; "
                    f"reference fields as {{{word}}}"
                )
        elif char == "=":
            detail = f"Assignment is not allowed at position {pos + 1}; use '==' to compare"
        else:
            detail = f"Unexpected character '{char}' at position {pos + 1}"
        return FormulaSyntaxError(detail, formula, pos)

    if isinstance(error, UnexpectedToken):
        token = error.token
        if token.type == "$END":
            return FormulaSyntaxError("Unexpected end of formula", formula, len(formula))
        pos = token.start_pos if token.start_pos is not None else 0
        if token.type == "_RPAR" and formula[:pos].rstrip().endswith("("):
            opened = formula.rindex("(", 0, pos)
            return FormulaSyntaxError(
                f"Empty parentheses at position {opened + 1}", formula, opened
            )
        return FormulaSyntaxError(
            f"Unexpected '{token.value}' at position {pos + 1}", formula, pos
        )

    if isinstance(error, UnexpectedEOF):
        return FormulaSyntaxError("Unexpected end of formula", formula, len(formula))

    return FormulaSyntaxError(f"Invalid formula syntax: {error}", formula)


def _decode(kind: TokenKind, text: str) -> Any:
    if kind is TokenKind.FIELD_REF:
        return text[1:-1]
    if kind is TokenKind.NUMBER:
        return float(text)
    if kind is TokenKind.STRING:
        return text[1:-1]
    if kind is TokenKind.BOOLEAN:
        return text.lower() == "true"
    return text


def tokenize(formula: str) -> list[Token]:
    """
    Tokenize an expression formula.

    Args:
        formula: Expression formula

    Returns:
        Tokens in source order, whitespace dropped

    Raises:
        FormulaSyntaxError: On characters no terminal accepts
    """
    tokens: list[Token] = []
    try:
        for lark_token in get_lexer().lex(formula):
            kind = _TERMINAL_KINDS[lark_token.type]
            text = str(lark_token)
            tokens.append(Token(kind, text, lark_token.start_pos, _decode(kind, text)))
    except UnexpectedInput as e:
        raise describe_syntax_error(formula, e) from e
    return tokens


def tokenize_template(formula: str) -> list[Token]:
    """
    Tokenize a text template into TEXT and FIELD_REF tokens.

    Never fails: anything that is not a well-formed ``{identifier}`` span
    is literal text.
    """
    tokens: list[Token] = []
    cursor = 0
    for match in _FIELD_REF_RE.finditer(formula):
        if match.start() > cursor:
            text = formula[cursor:match.start()]
            tokens.append(Token(TokenKind.TEXT, text, cursor, text))
        tokens.append(Token(TokenKind.FIELD_REF, match.group(0), match.start(), match.group(1)))
        cursor = match.end()
    if cursor < len(formula):
        text = formula[cursor:]
        tokens.append(Token(TokenKind.TEXT, text, cursor, text))
    return tokens
