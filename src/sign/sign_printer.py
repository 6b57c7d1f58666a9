"""
Canonical source printer for SIGN ASTs.

`to_source(node)` renders an AST back to surface syntax. Parentheses are inserted
from the parse level of each node so that parsing the output reproduces the
tree (for trees the parser can produce: no `list` nodes, non-negative numbers).

Parse levels, loosest to tightest:

    0 match    1 define   2 lambda   3 product  4 or       5 xor
    6 and      7 compare  8 add/sub  9 mul/div/mod         10 power
    11 range/spread       12 get     13 prefix  14 postfix 15 primary

Statement positions (the top level and the elements of a block) print exports,
imports and matches bare; everywhere else they are parenthesized.
"""

import math
from decimal import Decimal

from sign.sign_ast import ASTNode
from sign.sign_operators import BinaryOperator, CompareOp, UnaryOperator
from sign.sign_tokens import format_number

MATCH_LEVEL = 0
DEFINE_LEVEL = 1
LAMBDA_LEVEL = 2
XOR_LEVEL = 5
COMPARE_LEVEL = 7
RANGE_LEVEL = 11
GET_LEVEL = 12
PREFIX_LEVEL = 13
POSTFIX_LEVEL = 14
PRIMARY_LEVEL = 15

_binary_levels: dict[BinaryOperator, int] = {
    BinaryOperator.DEFINE: DEFINE_LEVEL,
    BinaryOperator.LAMBDA: LAMBDA_LEVEL,
    BinaryOperator.PRODUCT: 3,
    BinaryOperator.OR: 4,
    BinaryOperator.XOR: XOR_LEVEL,
    BinaryOperator.AND: 6,
    BinaryOperator.ADD: 8,
    BinaryOperator.SUB: 8,
    BinaryOperator.MUL: 9,
    BinaryOperator.DIV: 9,
    BinaryOperator.MOD: 9,
    BinaryOperator.POWER: 10,
    BinaryOperator.RANGE: RANGE_LEVEL,
    BinaryOperator.GET: GET_LEVEL,
}

# Binary operators whose symbol can also start an expression after a postfix `~`.
_ambiguous_after_spread = (BinaryOperator.SUB, BinaryOperator.RANGE)


def level(node: ASTNode) -> int:
    """Returns the parse level a node is produced at."""
    if node.kind == "match":
        return MATCH_LEVEL
    if node.kind == "definition":
        return DEFINE_LEVEL
    if node.kind == "lambda":
        return LAMBDA_LEVEL
    if node.kind == "range":
        return RANGE_LEVEL
    if node.kind == "binary":
        if isinstance(node.value, CompareOp):
            return COMPARE_LEVEL
        return _binary_levels[node.value]
    if node.kind == "unary":
        if node.value is UnaryOperator.SPREAD:
            return RANGE_LEVEL
        if node.value is UnaryOperator.FACTORIAL:
            return POSTFIX_LEVEL
        if node.value in (UnaryOperator.EXPORT, UnaryOperator.IMPORT):
            return PRIMARY_LEVEL  # always parenthesized by render_unary
        return PREFIX_LEVEL
    return PRIMARY_LEVEL


def to_source(node: ASTNode) -> str:
    """Render `node` as SIGN source.

    A top-level block prints as one statement per line; an empty block as `[]`.

    Raises:
        ValueError: If the node has no surface form (a string holding a backtick
            or newline, a non-finite number, a match on a non-identifier).
    """
    if node.kind == "block" and node.children:
        return "\n".join(render_statement(child) for child in node.children)
    return render_statement(node)


def render_statement(node: ASTNode) -> str:
    if node.kind == "unary" and node.value in (UnaryOperator.EXPORT, UnaryOperator.IMPORT):
        return node.value.symbol + render(node.children[0], DEFINE_LEVEL)
    if node.kind == "match":
        return render_match(node)
    return render(node, MATCH_LEVEL)


def render(node: ASTNode, min_level: int) -> str:
    """Render `node`, parenthesized if it binds looser than `min_level`."""
    text = render_bare(node)
    if level(node) < min_level:
        return f"({text})"
    return text


def render_bare(node: ASTNode) -> str:
    kind = node.kind

    if kind == "number":
        return render_number(node.value)

    if kind == "string":
        if "`" in node.value or "\n" in node.value:
            raise ValueError(f"string {node.value!r} cannot be written as a literal")
        return f"`{node.value}`"

    if kind == "char":
        return f"\\{node.value}"

    if kind == "identifier":
        return node.value

    if kind == "block":
        return "[" + "\n".join(render_statement(c) for c in node.children) + "]"

    if kind == "list":
        return "[" + ", ".join(render(c, 4) for c in node.children) + "]"

    if kind == "definition":
        name, value = node.children
        value_text = render(value, DEFINE_LEVEL)
        # `name : ? ...` at the start of a statement reads as a match
        if name.kind == "identifier" and value_text.startswith("?"):
            value_text = f"({value_text})"
        return f"{render(name, LAMBDA_LEVEL)} : {value_text}"

    if kind == "lambda":
        params = " ".join(str(p) for p in node.value)
        body = render(node.children[0], LAMBDA_LEVEL)
        return f"{params} ? {body}" if params else f"? {body}"

    if kind == "unary":
        return render_unary(node)

    if kind == "binary":
        return render_binary(node.value, node.children[0], node.children[1])

    if kind == "range":
        return render_binary(BinaryOperator.RANGE, node.children[0], node.children[1])

    if kind == "match":
        return render_match(node)

    raise ValueError(f"Unknown node kind: {kind}")


def render_number(value: float) -> str:
    if not math.isfinite(value):
        raise ValueError(f"number {value!r} cannot be written as a literal")
    if value == int(value):
        return format_number(value)
    # shortest round-tripping digits, never in exponent form
    return format(Decimal(repr(value)), "f")


def render_unary(node: ASTNode) -> str:
    op: UnaryOperator = node.value
    operand = node.children[0]

    if op in (UnaryOperator.EXPORT, UnaryOperator.IMPORT):
        return f"({op.symbol}{render(operand, DEFINE_LEVEL)})"

    if op is UnaryOperator.REST_PARAM:
        if operand.kind != "identifier":
            raise ValueError("rest parameter operand must be an identifier")
        return f"~{operand.value}"

    if op is UnaryOperator.SPREAD:
        text = render(operand, RANGE_LEVEL)
        if text.endswith("~"):
            text = f"({text})"
        return f"{text}~"

    if op.is_postfix:
        return f"{render(operand, POSTFIX_LEVEL)}{op.symbol}"

    return f"{op.symbol}{render(operand, PREFIX_LEVEL)}"


def render_binary(op: BinaryOperator | CompareOp, left: ASTNode, right: ASTNode) -> str:
    if isinstance(op, CompareOp):
        prec = COMPARE_LEVEL
        left_min, right_min = prec + 1, prec + 1
    else:
        prec = _binary_levels[op]
        if op.is_right_associative:
            left_min, right_min = prec + 1, prec
        else:
            left_min, right_min = prec, prec + 1

    left_text = render(left, left_min)
    if left_text.endswith("~") and op in _ambiguous_after_spread:
        left_text = f"({left_text})"
    return f"{left_text} {op.symbol} {render(right, right_min)}"


def render_match(node: ASTNode) -> str:
    scrutinee = node.children[0] if node.children else None
    if scrutinee is None or scrutinee.kind != "identifier":
        raise ValueError("match scrutinee must be an identifier")
    if not node.cases:
        raise ValueError("match needs at least one case")

    cases = []
    for pattern, result in node.cases:
        result_text = render(result, XOR_LEVEL)
        if pattern.kind == "identifier" and pattern.value == "_":
            cases.append(result_text)
        else:
            cases.append(f"{render(pattern, XOR_LEVEL)} : {result_text}")
    return f"{scrutinee.value} : ? " + " | ".join(cases)


__all__ = ["level", "to_source"]
