"""
Defines the abstract syntax tree (AST) node structure for the SIGN programming language.

Classes:
    ASTNode:
        Represents a node in the syntax tree, produced by the parser and consumed by the
        printer, the CLI and any backend. Carries line/column metadata for error reporting.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain Python dictionaries,
        suitable for JSON output or debugging.

    Parameter:
        A lambda parameter, either normal (`x`) or rest (`~xs`), with validation helpers.

Each ASTNode tracks:
    kind (str): The syntactic construct, one of
        "number", "string", "char", "identifier", "block", "definition", "lambda",
        "unary", "binary", "list", "range", "match".
    value: The payload. A float, str, or name for literals; the operator for "unary"
        and "binary"; the list of Parameters for "lambda"; None otherwise.
    children (list[ASTNode]): Sub-expressions, in source order.
    cases (list[tuple[ASTNode, ASTNode]]): (pattern, result) pairs of a "match".
    line (int): Source line number for error messages.
    col (int): Source column number for error messages.

Blocks holding a single element never exist: `make_block` collapses them to the
element itself, and the parser builds every block through it.

Example:
    node = ASTNode("binary", BinaryOperator.ADD, [ASTNode("number", 1.0), ASTNode("number", 2.0)])
"""

from typing import Any, TypedDict

from sign.sign_errors import InvalidIdentifier, InvalidSyntax, MultipleRestParameters
from sign.sign_operators import BinaryOperator, CompareOp, UnaryOperator
from sign.sign_tokens import format_number


class Parameter:
    """A lambda parameter.

    Attributes:
        name (str): The bound name.
        is_rest (bool): True for a rest parameter (`~xs`) collecting remaining arguments.
    """

    def __init__(self, name: str, is_rest: bool = False) -> None:
        self.name = name
        self.is_rest = is_rest

    @classmethod
    def normal(cls, name: str) -> "Parameter":
        return cls(name)

    @classmethod
    def rest(cls, name: str) -> "Parameter":
        return cls(name, is_rest=True)

    def __repr__(self) -> str:
        return f"Parameter.{'rest' if self.is_rest else 'normal'}({self.name!r})"

    def __str__(self) -> str:
        return f"~{self.name}" if self.is_rest else self.name

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Parameter)
            and self.name == other.name
            and self.is_rest == other.is_rest
        )

    def __hash__(self) -> int:
        return hash((self.name, self.is_rest))

    @staticmethod
    def validate_params(params: list["Parameter"]) -> None:
        """Checks a parameter list.

        Raises:
            MultipleRestParameters: If more than one rest parameter is present.
            InvalidSyntax: If the rest parameter is not the last one.
        """
        if sum(1 for p in params if p.is_rest) > 1:
            raise MultipleRestParameters()
        for i, param in enumerate(params):
            if param.is_rest and i != len(params) - 1:
                raise InvalidSyntax("Rest parameter must be the last parameter")

    @staticmethod
    def validate_name(name: str) -> None:
        """Raises InvalidIdentifier unless `name` is a valid parameter name."""
        if not name:
            raise InvalidIdentifier("Parameter name cannot be empty")
        if not (name[0].isalpha() or name[0] == "_"):
            raise InvalidIdentifier(f"Invalid parameter name: {name}")
        if not all(c.isalnum() or c == "_" for c in name):
            raise InvalidIdentifier(f"Invalid parameter name: {name}")


class CaseDict(TypedDict):
    pattern: "ASTDict"
    result: "ASTDict"


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The type of AST node (e.g., "binary", "lambda", "match").
        value (Any): Literal payload, operator name, or list of parameter strings.
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.
        children (List[ASTDict]): Child nodes in the AST hierarchy.
        cases (List[CaseDict]): Pattern/result pairs of a match node.
    """

    kind: str
    value: Any
    line: int
    col: int
    children: list["ASTDict"]
    cases: list[CaseDict]


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) for the SIGN language.

    Args:
        kind (str): The type of node (e.g., "number", "binary", "lambda").
        value (Any, optional): Literal payload, operator, or parameter list.
        children (list[ASTNode], optional): Sub-expressions in source order.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
        cases (list[tuple[ASTNode, ASTNode]], optional): Match arms.

    Methods:
        __repr__(): Returns a structured string representation for debugging.
        __eq__(other): Structural equality; source positions are ignored.
        to_dict(): Converts the node (and all descendants) into a nested dictionary format.
    """

    def __init__(
        self,
        kind: str,
        value: Any = None,
        children: list["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
        cases: list[tuple["ASTNode", "ASTNode"]] | None = None,
    ):
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.line = line
        self.col = col
        self.cases: list[tuple["ASTNode", "ASTNode"]] = cases or []

    @property
    def chars(self) -> list[str]:
        """The characters of a string literal, in order."""
        if self.kind != "string":
            raise TypeError(f"{self.kind} node has no characters")
        return list(self.value)

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        if self.cases:
            preview = ", ".join(f"({p!r}, {r!r})" for p, r in self.cases[:3])
            if len(self.cases) > 3:
                preview += ", ..."
            parts.append(f"cases=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.children == other.children
            and self.cases == other.cases
        )

    def to_dict(self) -> ASTDict:
        val: Any = self.value
        if isinstance(val, (UnaryOperator, BinaryOperator, CompareOp)):
            val = val.name
        elif isinstance(val, list):
            val = [str(p) for p in val]

        result: ASTDict = {
            "kind": self.kind,
            "value": val,
            "line": self.line,
            "col": self.col,
            "children": [c.to_dict() for c in self.children],
        }
        if self.kind == "match":
            result["cases"] = [
                {"pattern": p.to_dict(), "result": r.to_dict()} for p, r in self.cases
            ]
        return result


def make_block(items: list[ASTNode], line: int = 0, col: int = 0) -> ASTNode:
    """Builds a block, collapsing a single element to the element itself."""
    if len(items) == 1:
        return items[0]
    return ASTNode("block", children=list(items), line=line, col=col)


def describe(node: ASTNode) -> str:
    """One-line label of a node used by `format_tree`."""
    if node.kind == "number":
        return f"number {format_number(node.value)}"
    if node.kind == "string":
        return f"string `{node.value}`"
    if node.kind == "char":
        return f"char \\{node.value}"
    if node.kind == "identifier":
        return f"identifier {node.value}"
    if node.kind == "lambda":
        params = " ".join(str(p) for p in node.value)
        return f"lambda {params}".rstrip()
    if node.kind in ("unary", "binary"):
        return f"{node.kind} {node.value.name} {node.value.symbol}"
    return node.kind


def format_tree(node: ASTNode, indent: int = 0) -> str:
    """Renders an indented, multi-line dump of the tree, two spaces per level."""
    pad = "  " * indent
    lines = [pad + describe(node)]
    for child in node.children:
        lines.append(format_tree(child, indent + 1))
    for pattern, result in node.cases:
        lines.append(f"{pad}  case")
        lines.append(format_tree(pattern, indent + 2))
        lines.append(format_tree(result, indent + 2))
    return "\n".join(lines)


__all__ = ["ASTDict", "ASTNode", "Parameter", "describe", "format_tree", "make_block"]
