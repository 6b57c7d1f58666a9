"""
Token model for the SIGN language.

Tokens are produced one at a time by the lexer and consumed immediately by the
parser. Each token has a string type, an optional payload and its source
position.

Token types:
    Literals:    IDENT, STRING, NUMBER, CHAR
    Brackets:    LBRACK, RBRACK, LBRACE, RBRACE, LPAREN, RPAREN
    Layout:      NEWLINE, INDENT (payload: width), DEDENT, EOF
    Operators:   DEFINE, LAMBDA, PRODUCT, EXPORT, IMPORT, NOT, SPREAD,
                 AND, OR, XOR, LT, LE, EQ, NE, GE, GT,
                 PLUS, MINUS, MULT, DIV, MOD, POW, GET

`!` and `~` are lexed once as NOT and SPREAD; whether they act as prefix,
postfix or infix operators is decided by the parser from grammatical position.

Exports:
    - Token
    - token_hashmap: single-character lexemes to token types
    - two_char_hashmap: two-character lexemes to token types
    - bracket_pairs / closing_brackets
"""

import math
from typing import Any

token_hashmap: dict[str, str] = {
    "[": "LBRACK",
    "]": "RBRACK",
    "{": "LBRACE",
    "}": "RBRACE",
    "(": "LPAREN",
    ")": "RPAREN",
    ":": "DEFINE",
    "?": "LAMBDA",
    ",": "PRODUCT",
    "~": "SPREAD",
    "#": "EXPORT",
    "@": "IMPORT",
    "'": "GET",
    "+": "PLUS",
    "-": "MINUS",
    "*": "MULT",
    "/": "DIV",
    "%": "MOD",
    "^": "POW",
    "|": "OR",
    ";": "XOR",
    "&": "AND",
    "!": "NOT",
    "<": "LT",
    ">": "GT",
    "=": "EQ",
}

two_char_hashmap: dict[str, str] = {
    "!=": "NE",
    "<=": "LE",
    "<>": "NE",
    ">=": "GE",
    "==": "EQ",
}

bracket_pairs: dict[str, str] = {
    "LBRACK": "RBRACK",
    "LBRACE": "RBRACE",
    "LPAREN": "RPAREN",
}

closing_brackets: frozenset[str] = frozenset(bracket_pairs.values())

literal_types: frozenset[str] = frozenset({"IDENT", "STRING", "NUMBER", "CHAR"})

prefix_operator_types: frozenset[str] = frozenset({"EXPORT", "IMPORT", "NOT", "MINUS"})

postfix_operator_types: frozenset[str] = frozenset({"NOT", "SPREAD"})

# Tokens that may begin an expression; `~` counts because of `~name`.
expression_start_types: frozenset[str] = (
    literal_types
    | frozenset(bracket_pairs)
    | frozenset({"NOT", "EXPORT", "IMPORT", "MINUS", "SPREAD"})
)


class Token:
    """Represents a single lexical token in the SIGN language.

    Attributes:
        type (str): The token type (e.g. 'IDENT', 'NUMBER', 'INDENT', 'EOF').
        value (Any): Payload: the name, string, float, char or indent width.
            Operators and brackets carry their lexeme.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: str, value: Any = None, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r})"

    def __str__(self) -> str:
        """Surface form of the token, used in error messages."""
        if self.type == "STRING":
            return f"`{self.value}`"
        if self.type == "CHAR":
            return f"\\{self.value}"
        if self.type == "NUMBER":
            return format_number(self.value)
        if self.type == "INDENT":
            return f"<indent:{self.value}>"
        if self.type in ("DEDENT", "NEWLINE", "EOF"):
            return f"<{self.type.lower()}>"
        return str(self.value)

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))

    def is_prefix_operator(self) -> bool:
        return self.type in prefix_operator_types

    def is_postfix_operator(self) -> bool:
        return self.type in postfix_operator_types

    def can_start_expression(self) -> bool:
        return self.type in expression_start_types


def format_number(value: float) -> str:
    """Render a float the way it is written in source: `42`, `1.5`."""
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return repr(value)


__all__ = [
    "Token",
    "bracket_pairs",
    "closing_brackets",
    "expression_start_types",
    "format_number",
    "literal_types",
    "token_hashmap",
    "two_char_hashmap",
]
