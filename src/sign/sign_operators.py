"""
Operator definitions and the precedence/associativity table for SIGN.

Classes:
    UnaryOperator: Prefix (`!`, `#`, `@`, `~`, `-`) and postfix (`!`, `~`) operators.
    BinaryOperator: Infix operators from Define (`:`) to Get (`'`) and Range (`~`).
    CompareOp: The six comparison operators, all sharing one precedence level.

Precedence runs from 1 (binds loosest) to 11 (binds tightest):

    1  Define   :        right
    2  Lambda   ?        right
    3  Product  ,
    4  Or       |
    5  Xor      ;
    6  And      &
    7  Compare  < <= = != >= >   (chained)
    8  Add/Sub  + -
    9  Mul/Div/Mod  * / %
    10 Power    ^        right
    11 Get/Range  ' ~

The table is pure data. Deciding whether a `!` or `~` token is prefix, infix or
postfix is the parser's job.
"""

from enum import Enum, auto


class UnaryOperator(Enum):
    NOT = auto()
    EXPORT = auto()
    IMPORT = auto()
    REST_PARAM = auto()
    NEGATIVE = auto()
    FACTORIAL = auto()
    SPREAD = auto()

    @property
    def symbol(self) -> str:
        return _unary_symbols[self]

    @property
    def is_prefix(self) -> bool:
        return self not in (UnaryOperator.FACTORIAL, UnaryOperator.SPREAD)

    @property
    def is_postfix(self) -> bool:
        return not self.is_prefix

    @property
    def precedence(self) -> int:
        return _unary_precedence[self]

    def __str__(self) -> str:
        return self.symbol


class BinaryOperator(Enum):
    DEFINE = auto()
    LAMBDA = auto()
    PRODUCT = auto()
    OR = auto()
    XOR = auto()
    AND = auto()
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    MOD = auto()
    POWER = auto()
    GET = auto()
    RANGE = auto()

    @property
    def symbol(self) -> str:
        return _binary_symbols[self]

    @property
    def precedence(self) -> int:
        return _binary_precedence[self]

    @property
    def is_right_associative(self) -> bool:
        return self in _right_associative

    def __str__(self) -> str:
        return self.symbol


class CompareOp(Enum):
    LESS = auto()
    LESS_EQUAL = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()
    GREATER_EQUAL = auto()
    GREATER = auto()

    @property
    def symbol(self) -> str:
        return _compare_symbols[self]

    @property
    def precedence(self) -> int:
        return COMPARE_PRECEDENCE

    @property
    def is_right_associative(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.symbol


COMPARE_PRECEDENCE = 7

_unary_symbols: dict[UnaryOperator, str] = {
    UnaryOperator.NOT: "!",
    UnaryOperator.EXPORT: "#",
    UnaryOperator.IMPORT: "@",
    UnaryOperator.REST_PARAM: "~",
    UnaryOperator.NEGATIVE: "-",
    UnaryOperator.FACTORIAL: "!",
    UnaryOperator.SPREAD: "~",
}

_unary_precedence: dict[UnaryOperator, int] = {
    UnaryOperator.EXPORT: 1,
    UnaryOperator.IMPORT: 1,
    UnaryOperator.REST_PARAM: 1,
    UnaryOperator.NOT: 9,
    UnaryOperator.NEGATIVE: 9,
    UnaryOperator.FACTORIAL: 11,
    UnaryOperator.SPREAD: 11,
}

_binary_symbols: dict[BinaryOperator, str] = {
    BinaryOperator.DEFINE: ":",
    BinaryOperator.LAMBDA: "?",
    BinaryOperator.PRODUCT: ",",
    BinaryOperator.OR: "|",
    BinaryOperator.XOR: ";",
    BinaryOperator.AND: "&",
    BinaryOperator.ADD: "+",
    BinaryOperator.SUB: "-",
    BinaryOperator.MUL: "*",
    BinaryOperator.DIV: "/",
    BinaryOperator.MOD: "%",
    BinaryOperator.POWER: "^",
    BinaryOperator.GET: "'",
    BinaryOperator.RANGE: "~",
}

_binary_precedence: dict[BinaryOperator, int] = {
    BinaryOperator.DEFINE: 1,
    BinaryOperator.LAMBDA: 2,
    BinaryOperator.PRODUCT: 3,
    BinaryOperator.OR: 4,
    BinaryOperator.XOR: 5,
    BinaryOperator.AND: 6,
    BinaryOperator.ADD: 8,
    BinaryOperator.SUB: 8,
    BinaryOperator.MUL: 9,
    BinaryOperator.DIV: 9,
    BinaryOperator.MOD: 9,
    BinaryOperator.POWER: 10,
    BinaryOperator.GET: 11,
    BinaryOperator.RANGE: 11,
}

_right_associative: frozenset[BinaryOperator] = frozenset(
    {BinaryOperator.DEFINE, BinaryOperator.LAMBDA, BinaryOperator.POWER}
)

_compare_symbols: dict[CompareOp, str] = {
    CompareOp.LESS: "<",
    CompareOp.LESS_EQUAL: "<=",
    CompareOp.EQUAL: "=",
    CompareOp.NOT_EQUAL: "!=",
    CompareOp.GREATER_EQUAL: ">=",
    CompareOp.GREATER: ">",
}

# TOKEN MAPPINGS (PARSER)

binary_token_map: dict[str, BinaryOperator] = {
    "DEFINE": BinaryOperator.DEFINE,
    "LAMBDA": BinaryOperator.LAMBDA,
    "PRODUCT": BinaryOperator.PRODUCT,
    "OR": BinaryOperator.OR,
    "XOR": BinaryOperator.XOR,
    "AND": BinaryOperator.AND,
    "PLUS": BinaryOperator.ADD,
    "MINUS": BinaryOperator.SUB,
    "MULT": BinaryOperator.MUL,
    "DIV": BinaryOperator.DIV,
    "MOD": BinaryOperator.MOD,
    "POW": BinaryOperator.POWER,
    "GET": BinaryOperator.GET,
    "SPREAD": BinaryOperator.RANGE,
}

compare_token_map: dict[str, CompareOp] = {
    "LT": CompareOp.LESS,
    "LE": CompareOp.LESS_EQUAL,
    "EQ": CompareOp.EQUAL,
    "NE": CompareOp.NOT_EQUAL,
    "GE": CompareOp.GREATER_EQUAL,
    "GT": CompareOp.GREATER,
}

prefix_token_map: dict[str, UnaryOperator] = {
    "NOT": UnaryOperator.NOT,
    "EXPORT": UnaryOperator.EXPORT,
    "IMPORT": UnaryOperator.IMPORT,
    "MINUS": UnaryOperator.NEGATIVE,
    "SPREAD": UnaryOperator.REST_PARAM,
}

postfix_token_map: dict[str, UnaryOperator] = {
    "NOT": UnaryOperator.FACTORIAL,
    "SPREAD": UnaryOperator.SPREAD,
}


def lookup(token_type: str) -> tuple[int, bool]:
    """Returns `(precedence, right_associative)` for an infix token type.

    Non-operator token types map to `(0, False)`.

    Example:
        >>> lookup("POW")
        (10, True)
        >>> lookup("LT")
        (7, False)
    """
    if token_type in compare_token_map:
        return COMPARE_PRECEDENCE, False
    op = binary_token_map.get(token_type)
    if op is None:
        return 0, False
    return op.precedence, op.is_right_associative


__all__ = [
    "COMPARE_PRECEDENCE",
    "BinaryOperator",
    "CompareOp",
    "UnaryOperator",
    "binary_token_map",
    "compare_token_map",
    "lookup",
    "postfix_token_map",
    "prefix_token_map",
]
