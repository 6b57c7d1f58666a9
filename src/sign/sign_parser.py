"""
SIGN Language Parser

Parses SIGN language tokens into a single abstract syntax tree (AST).

This module implements a hand-written recursive-descent parser with one method per
precedence level. Tokens are pulled lazily from any iterable (a list, or a `Lexer`
for true pull-model lexing) into a lookahead buffer; `checkpoint()` and `rewind()`
move the cursor over that buffer so lambda parameter lists can be recognized
speculatively.

Grammar Overview
----------------
- Statements:
    * Sequences separated by NEWLINE, at top level, inside `[ ]`, `{ }`, `( )`,
      and inside indented blocks (INDENT ... DEDENT)
    * Export / import of a whole expression: `#x : 1`, `@lib`
    * Pattern match: `name : ? pattern : result | pattern : result | default`

- Expressions, loosest to tightest:
    * Define `:` (right), Lambda `?` (right), Product `,`, Or `|`, Xor `;`, And `&`
    * Comparison chain `< <= = != >= >`: `a < b < c` becomes `(a < b) & (b < c)`
    * Add/Sub `+ -`, Mul/Div/Mod `* / %`, Power `^` (right)
    * Range `a ~ b` or postfix Spread `xs~`
    * Get `'`
    * Prefix `!`, `#`, `@`, `-`, and `~name` (rest parameter)
    * Postfix `!` (factorial)
    * Primary: number, string, char, identifier, bracket block, indented block

Entry Points
------------
- `Parser(tokens).parse()`: Parse a full program into one ASTNode.
- `parse(source)`: Lex and parse a source string.

Raises
------
CompileError
    The first LexError or ParseError encountered aborts the parse.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from copy import deepcopy

from sign.sign_ast import ASTNode, Parameter, make_block
from sign.sign_errors import (
    ExpectedToken,
    InvalidOperator,
    InvalidSyntax,
    UnexpectedEOF,
    UnexpectedError,
    UnexpectedIndentation,
    UnexpectedToken,
    UnmatchedBracket,
)
from sign.sign_lexer import CharacterStream, Lexer
from sign.sign_operators import (
    BinaryOperator,
    UnaryOperator,
    binary_token_map,
    compare_token_map,
    lookup,
    postfix_token_map,
    prefix_token_map,
)
from sign.sign_tokens import Token, bracket_pairs, closing_brackets

logger = logging.getLogger(__name__)

literal_kinds: dict[str, str] = {
    "NUMBER": "number",
    "STRING": "string",
    "CHAR": "char",
    "IDENT": "identifier",
}


class Parser:
    """
    SIGN Parser Class

    Transforms a stream of lexical tokens into one `ASTNode` for the whole program.

    Attributes
    ----------
    tokens : list[Token]
        Tokens pulled from the source so far (the lookahead buffer).
    position : int
        Current index into the buffer.

    Methods
    -------
    parse() -> ASTNode
        Parse a complete program; several top-level statements form a block.
    parse_statement() -> ASTNode
        Parse a single statement (export/import, indented block, match, expression).
    parse_expression() -> ASTNode
        Parse an expression starting at the Define level.
    checkpoint() -> int / rewind(mark)
        Save and restore the cursor for speculative parsing.

    Raises
    ------
    CompileError
        When an invalid construct or malformed syntax is encountered during parsing.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.source = iter(tokens)
        self.tokens: list[Token] = []
        self.position: int = 0

    # TOKEN BUFFER

    def fill(self, index: int) -> Token:
        """Pulls tokens until `index` is buffered; the stream always ends in EOF."""
        while len(self.tokens) <= index:
            if self.tokens and self.tokens[-1].type == "EOF":
                return self.tokens[-1]
            tok = next(self.source, None)
            if tok is None:
                last = self.tokens[-1] if self.tokens else None
                tok = Token("EOF", "EOF", last.line if last else 0, last.col if last else 0)
            self.tokens.append(tok)
        return self.tokens[index]

    def current(self) -> Token:
        return self.fill(self.position)

    def peek(self, offset: int = 1) -> Token:
        return self.fill(self.position + offset)

    def previous(self) -> Token | None:
        return self.tokens[self.position - 1] if self.position > 0 else None

    def advance(self) -> Token:
        """Consumes and returns the current token; EOF is never consumed."""
        tok = self.current()
        if tok.type != "EOF":
            self.position += 1
        return tok

    def checkpoint(self) -> int:
        return self.position

    def rewind(self, mark: int) -> None:
        self.position = mark

    def match(self, *types: str) -> Token | None:
        tok = self.current()
        if tok.type in types:
            return self.advance()
        return None

    def expect(self, type_: str, description: str) -> Token:
        tok = self.current()
        if tok.type == type_:
            return self.advance()
        if tok.type == "EOF":
            raise UnexpectedEOF(tok.line, tok.col)
        raise ExpectedToken(description, str(tok), tok.line, tok.col)

    def skip_newlines(self) -> None:
        while self.current().type == "NEWLINE":
            self.advance()

    # STATEMENTS

    def parse(self) -> ASTNode:
        """Parse a full SIGN program and return its AST.

        Raises:
            UnexpectedError: If the input nests deeper than the interpreter's
                recursion limit allows.
        """
        first = self.current()
        try:
            statements = self.parse_sequence(("EOF",))
        except RecursionError as e:
            tok = self.current()
            logger.debug("recursion limit hit at line %d, col %d", tok.line, tok.col)
            raise UnexpectedError("expression nesting too deep") from e
        return make_block(statements, first.line, first.col)

    def parse_sequence(self, closers: tuple[str, ...]) -> list[ASTNode]:
        """Parse statements until one of `closers` is current (it is not consumed).

        Statements are separated by NEWLINE; a statement ending with an indented
        block (so the previous token is DEDENT) needs no further separator.
        """
        statements: list[ASTNode] = []
        separated = True
        while True:
            tok = self.current()
            if tok.type == "NEWLINE":
                self.advance()
                separated = True
                continue
            if tok.type in closers:
                return statements
            if tok.type == "EOF":
                raise UnexpectedEOF(tok.line, tok.col)
            if not separated and tok.type not in closing_brackets and tok.type != "DEDENT":
                raise InvalidSyntax(
                    f"expected newline between statements, found {tok}", tok.line, tok.col
                )
            statements.append(self.parse_statement())
            prev = self.previous()
            separated = prev is not None and prev.type == "DEDENT"

    def parse_statement(self) -> ASTNode:
        """Parse one statement."""
        tok = self.current()

        if tok.type in ("EXPORT", "IMPORT"):
            self.advance()
            expr = self.parse_expression()
            return ASTNode(
                "unary", prefix_token_map[tok.type], [expr], line=tok.line, col=tok.col
            )

        if tok.type == "INDENT":
            return self.parse_indented_block()

        if tok.type == "DEDENT":
            raise UnexpectedIndentation(tok.line, tok.col)

        if (
            tok.type == "IDENT"
            and self.peek(1).type == "DEFINE"
            and self.peek(2).type == "LAMBDA"
        ):
            return self.parse_match()

        return self.parse_expression()

    def parse_indented_block(self) -> ASTNode:
        start = self.expect("INDENT", "indented block")
        items = self.parse_sequence(("DEDENT",))
        self.expect("DEDENT", "end of indented block")
        return make_block(items, start.line, start.col)

    def parse_bracket_block(self) -> ASTNode:
        """Parse `[ ... ]`, `{ ... }` or `( ... )`; the three are interchangeable."""
        open_tok = self.advance()
        items = self.parse_sequence(tuple(closing_brackets))
        close_tok = self.current()
        if close_tok.type != bracket_pairs[open_tok.type]:
            raise UnmatchedBracket(
                open_tok.value, close_tok.value, close_tok.line, close_tok.col
            )
        self.advance()
        return make_block(items, open_tok.line, open_tok.col)

    def parse_match(self) -> ASTNode:
        """Parse `name : ? case | case ...`.

        The cases may start on the next line, optionally as an indented block.
        A case without `:` is a default case matching `_`.
        """
        name = self.advance()
        self.advance()
        self.advance()
        self.skip_newlines()
        indented = self.match("INDENT") is not None

        cases = [self.parse_case()]
        while True:
            mark = self.checkpoint()
            self.skip_newlines()
            if self.match("OR") is None:
                self.rewind(mark)
                break
            self.skip_newlines()
            cases.append(self.parse_case())

        if indented:
            self.skip_newlines()
            self.expect("DEDENT", "end of match cases")

        scrutinee = ASTNode("identifier", name.value, line=name.line, col=name.col)
        return ASTNode(
            "match", children=[scrutinee], cases=cases, line=name.line, col=name.col
        )

    def parse_case(self) -> tuple[ASTNode, ASTNode]:
        pattern = self.parse_xor()
        if self.match("DEFINE") is not None:
            return pattern, self.parse_xor()
        return ASTNode("identifier", "_", line=pattern.line, col=pattern.col), pattern

    # EXPRESSIONS

    def parse_expression(self) -> ASTNode:
        return self.parse_define()

    def binary(self, op_tok: Token, left: ASTNode, right: ASTNode) -> ASTNode:
        op = compare_token_map.get(op_tok.type) or binary_token_map[op_tok.type]
        return ASTNode("binary", op, [left, right], line=left.line, col=left.col)

    def parse_infix(
        self,
        types: tuple[str, ...],
        operand: Callable[[], ASTNode],
        level: Callable[[], ASTNode],
    ) -> ASTNode:
        """Parse one binary precedence level.

        Left-associative operators fold left over `operand`; right-associative ones
        recurse into `level` for their right-hand side.
        """
        left = operand()
        while self.current().type in types:
            op_tok = self.advance()
            _, right_assoc = lookup(op_tok.type)
            right = level() if right_assoc else operand()
            left = self.binary(op_tok, left, right)
        return left

    def parse_define(self) -> ASTNode:
        left = self.parse_lambda()
        if self.match("DEFINE") is None:
            return left
        right = self.parse_define()
        return ASTNode("definition", children=[left, right], line=left.line, col=left.col)

    def scan_params(self) -> list[Parameter]:
        """Collects a run of `name` / `~name` tokens; a rest parameter ends the run."""
        params: list[Parameter] = []
        while True:
            tok = self.current()
            if tok.type == "IDENT":
                self.advance()
                params.append(Parameter.normal(tok.value))
            elif tok.type == "SPREAD" and self.peek().type == "IDENT":
                self.advance()
                params.append(Parameter.rest(self.advance().value))
                break
            else:
                break
        return params

    def parse_lambda(self) -> ASTNode:
        start = self.current()
        mark = self.checkpoint()
        params = self.scan_params()

        if self.match("LAMBDA") is not None:
            for param in params:
                Parameter.validate_name(param.name)
            Parameter.validate_params(params)
            body = self.parse_lambda()
            return ASTNode("lambda", params, [body], line=start.line, col=start.col)

        if params:
            logger.debug("no lambda after %d names at line %d, rewinding", len(params), start.line)
        self.rewind(mark)
        expr = self.parse_product()
        tok = self.current()
        if tok.type == "LAMBDA":
            raise InvalidOperator("?", "lambda parameter list", tok.line, tok.col)
        return expr

    def parse_product(self) -> ASTNode:
        return self.parse_infix(("PRODUCT",), self.parse_or, self.parse_product)

    def parse_or(self) -> ASTNode:
        return self.parse_infix(("OR",), self.parse_xor, self.parse_or)

    def parse_xor(self) -> ASTNode:
        return self.parse_infix(("XOR",), self.parse_and, self.parse_xor)

    def parse_and(self) -> ASTNode:
        return self.parse_infix(("AND",), self.parse_comparison, self.parse_and)

    def parse_comparison(self) -> ASTNode:
        """Parse a comparison chain.

        `a < b < c` becomes `(a < b) & (b < c)`; the middle operand is copied.
        """
        left = self.parse_additive()
        chain: ASTNode | None = None
        while self.current().type in compare_token_map:
            op_tok = self.advance()
            right = self.parse_additive()
            comparison = self.binary(op_tok, left, right)
            if chain is None:
                chain = comparison
            else:
                chain = ASTNode(
                    "binary",
                    BinaryOperator.AND,
                    [chain, comparison],
                    line=chain.line,
                    col=chain.col,
                )
            left = deepcopy(right)
        return chain if chain is not None else left

    def parse_additive(self) -> ASTNode:
        return self.parse_infix(
            ("PLUS", "MINUS"), self.parse_multiplicative, self.parse_additive
        )

    def parse_multiplicative(self) -> ASTNode:
        return self.parse_infix(
            ("MULT", "DIV", "MOD"), self.parse_power, self.parse_multiplicative
        )

    def parse_power(self) -> ASTNode:
        return self.parse_infix(("POW",), self.parse_range, self.parse_power)

    def parse_range(self) -> ASTNode:
        """Parse `a ~ b` (range) or `a~` (postfix spread).

        `~` is a spread when nothing that can start an expression follows it.
        """
        left = self.parse_get()
        while self.current().type == "SPREAD":
            op_tok = self.advance()
            if self.current().can_start_expression():
                right = self.parse_get()
                left = ASTNode("range", children=[left, right], line=left.line, col=left.col)
            else:
                left = ASTNode(
                    "unary",
                    postfix_token_map[op_tok.type],
                    [left],
                    line=left.line,
                    col=left.col,
                )
        return left

    def parse_get(self) -> ASTNode:
        return self.parse_infix(("GET",), self.parse_prefix, self.parse_get)

    def parse_prefix(self) -> ASTNode:
        tok = self.current()

        if tok.type == "SPREAD":
            self.advance()
            name = self.current()
            if name.type != "IDENT":
                raise InvalidSyntax(
                    f"rest parameter requires an identifier, found {name}",
                    name.line,
                    name.col,
                )
            self.advance()
            ident = ASTNode("identifier", name.value, line=name.line, col=name.col)
            return ASTNode(
                "unary", prefix_token_map[tok.type], [ident], line=tok.line, col=tok.col
            )

        if tok.is_prefix_operator():
            self.advance()
            operand = self.parse_prefix()
            return ASTNode(
                "unary", prefix_token_map[tok.type], [operand], line=tok.line, col=tok.col
            )

        return self.parse_postfix()

    def parse_postfix(self) -> ASTNode:
        """Parse postfix `!`. A postfix `~` is left to `parse_range`."""
        expr = self.parse_primary()
        while self.current().is_postfix_operator():
            op = postfix_token_map[self.current().type]
            if op is UnaryOperator.SPREAD:
                break
            self.advance()
            expr = ASTNode("unary", op, [expr], line=expr.line, col=expr.col)
        return expr

    def parse_primary(self) -> ASTNode:
        tok = self.current()

        if tok.type in literal_kinds:
            self.advance()
            return ASTNode(literal_kinds[tok.type], tok.value, line=tok.line, col=tok.col)

        if tok.type in bracket_pairs:
            return self.parse_bracket_block()

        if tok.type == "NEWLINE":
            mark = self.checkpoint()
            self.skip_newlines()
            if self.current().type == "INDENT":
                return self.parse_indented_block()
            self.rewind(mark)

        if tok.type == "EOF":
            raise UnexpectedEOF(tok.line, tok.col)

        raise UnexpectedToken(str(tok), tok.line, tok.col)


def parse(source: str) -> ASTNode:
    """Lexes and parses a SIGN source string."""
    return Parser(Lexer(CharacterStream(source))).parse()


__all__ = ["Parser", "parse"]
