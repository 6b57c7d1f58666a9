import logging

import pytest

from sign.sign_ast import ASTNode, Parameter
from sign.sign_errors import (
    CompileError,
    ExpectedToken,
    InvalidOperator,
    InvalidSyntax,
    UnexpectedEOF,
    UnexpectedError,
    UnexpectedIndentation,
    UnexpectedToken,
    UnmatchedBracket,
    UnterminatedString,
)
from sign.sign_lexer import CharacterStream, Lexer, Token, tokenize
from sign.sign_operators import BinaryOperator, CompareOp, UnaryOperator
from sign.sign_parser import Parser, parse


def num(value: float) -> ASTNode:
    return ASTNode("number", value)


def ident(name: str) -> ASTNode:
    return ASTNode("identifier", name)


def binop(op: BinaryOperator | CompareOp, left: ASTNode, right: ASTNode) -> ASTNode:
    return ASTNode("binary", op, [left, right])


def unop(op: UnaryOperator, operand: ASTNode) -> ASTNode:
    return ASTNode("unary", op, [operand])


def block(*items: ASTNode) -> ASTNode:
    return ASTNode("block", children=list(items))


def define(name: ASTNode, value: ASTNode) -> ASTNode:
    return ASTNode("definition", children=[name, value])


def lam(params: list[Parameter], body: ASTNode) -> ASTNode:
    return ASTNode("lambda", params, [body])


def match(name: str, *cases: tuple[ASTNode, ASTNode]) -> ASTNode:
    return ASTNode("match", children=[ident(name)], cases=list(cases))


# Literals


def test_number() -> None:
    assert parse("42") == num(42.0)


def test_string() -> None:
    node = parse("`hi`")
    assert node == ASTNode("string", "hi")
    assert node.chars == ["h", "i"]


def test_char_and_identifier() -> None:
    assert parse("\\c") == ASTNode("char", "c")
    assert parse("name") == ident("name")


def test_unterminated_string_propagates() -> None:
    with pytest.raises(UnterminatedString):
        parse("`abc")


def test_positions_are_recorded() -> None:
    node = parse("a : 1\nb")
    second = node.children[1]
    assert (second.line, second.col) == (2, 1)


# Precedence and associativity


def test_mul_binds_tighter_than_add() -> None:
    assert parse("1 + 2 * 3") == binop(
        BinaryOperator.ADD, num(1), binop(BinaryOperator.MUL, num(2), num(3))
    )


def test_left_associative_sub() -> None:
    assert parse("a - b - c") == binop(
        BinaryOperator.SUB, binop(BinaryOperator.SUB, ident("a"), ident("b")), ident("c")
    )


def test_define_is_right_associative() -> None:
    assert parse("a : b : c") == define(ident("a"), define(ident("b"), ident("c")))


def test_power_is_right_associative() -> None:
    assert parse("a ^ b ^ c") == binop(
        BinaryOperator.POWER, ident("a"), binop(BinaryOperator.POWER, ident("b"), ident("c"))
    )


def test_low_precedence_levels() -> None:
    assert parse("a , b | c ; d & e") == binop(
        BinaryOperator.PRODUCT,
        ident("a"),
        binop(
            BinaryOperator.OR,
            ident("b"),
            binop(
                BinaryOperator.XOR,
                ident("c"),
                binop(BinaryOperator.AND, ident("d"), ident("e")),
            ),
        ),
    )


def test_get_binds_tighter_than_power() -> None:
    assert parse("a ' b ^ 2") == binop(
        BinaryOperator.POWER, binop(BinaryOperator.GET, ident("a"), ident("b")), num(2)
    )


def test_parentheses_group() -> None:
    assert parse("(1 + 2) * 3") == binop(
        BinaryOperator.MUL, binop(BinaryOperator.ADD, num(1), num(2)), num(3)
    )


# Comparison chains


def test_single_comparison() -> None:
    assert parse("a <= b") == binop(CompareOp.LESS_EQUAL, ident("a"), ident("b"))


def test_comparison_chain_uses_adjacent_operands() -> None:
    assert parse("a < b < c") == binop(
        BinaryOperator.AND,
        binop(CompareOp.LESS, ident("a"), ident("b")),
        binop(CompareOp.LESS, ident("b"), ident("c")),
    )


def test_long_comparison_chain_folds_left() -> None:
    assert parse("a < b = c != d") == binop(
        BinaryOperator.AND,
        binop(
            BinaryOperator.AND,
            binop(CompareOp.LESS, ident("a"), ident("b")),
            binop(CompareOp.EQUAL, ident("b"), ident("c")),
        ),
        binop(CompareOp.NOT_EQUAL, ident("c"), ident("d")),
    )


def test_comparison_chain_copies_middle_operand() -> None:
    node = parse("a < b + 1 < c")
    first, second = node.children
    assert first.children[1] == second.children[0]
    assert first.children[1] is not second.children[0]


# Lambdas


def test_identity_lambda() -> None:
    assert parse("x ? x") == lam([Parameter.normal("x")], ident("x"))


def test_lambda_with_rest_parameter() -> None:
    assert parse("x ~xs ? xs") == lam(
        [Parameter.normal("x"), Parameter.rest("xs")], ident("xs")
    )


def test_lambda_is_right_associative() -> None:
    assert parse("x ? y ? x + y") == lam(
        [Parameter.normal("x")],
        lam([Parameter.normal("y")], binop(BinaryOperator.ADD, ident("x"), ident("y"))),
    )


def test_lambda_without_parameters() -> None:
    assert parse("(? 1)") == lam([], num(1))


def test_definition_of_lambda() -> None:
    assert parse("add : a b ? a + b") == define(
        ident("add"),
        lam(
            [Parameter.normal("a"), Parameter.normal("b")],
            binop(BinaryOperator.ADD, ident("a"), ident("b")),
        ),
    )


def test_parameter_scan_rewinds_to_product() -> None:
    assert parse("a , b") == binop(BinaryOperator.PRODUCT, ident("a"), ident("b"))
    assert parse("a ~ b") == ASTNode("range", children=[ident("a"), ident("b")])


def test_rewind_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="sign.sign_parser"):
        parse("a + 1")
    assert "rewinding" in caplog.text


def test_question_mark_after_non_parameters() -> None:
    with pytest.raises(InvalidOperator) as excinfo:
        parse("1 ? 2")
    assert excinfo.value.operator == "?"
    assert excinfo.value.context == "lambda parameter list"


def test_second_rest_parameter_is_not_a_parameter_list() -> None:
    with pytest.raises(InvalidOperator):
        parse("~xs ~ys ? 1")


# Unary operators, range and spread


def test_prefix_operators() -> None:
    assert parse("-x") == unop(UnaryOperator.NEGATIVE, ident("x"))
    assert parse("!x") == unop(UnaryOperator.NOT, ident("x"))
    assert parse("a : @b") == define(ident("a"), unop(UnaryOperator.IMPORT, ident("b")))


def test_factorial_postfix() -> None:
    assert parse("n!") == unop(UnaryOperator.FACTORIAL, ident("n"))
    assert parse("!n!") == unop(UnaryOperator.NOT, unop(UnaryOperator.FACTORIAL, ident("n")))


def test_rest_param_prefix() -> None:
    assert parse("f ' ~xs") == binop(
        BinaryOperator.GET, ident("f"), unop(UnaryOperator.REST_PARAM, ident("xs"))
    )


def test_rest_param_requires_identifier() -> None:
    with pytest.raises(InvalidSyntax):
        parse("~1")


def test_range() -> None:
    assert parse("1 ~ 5") == ASTNode("range", children=[num(1), num(5)])


def test_range_end_is_get_level() -> None:
    assert parse("a ~ b ' c + 1") == binop(
        BinaryOperator.ADD,
        ASTNode(
            "range",
            children=[ident("a"), binop(BinaryOperator.GET, ident("b"), ident("c"))],
        ),
        num(1),
    )


def test_spread_postfix() -> None:
    assert parse("xs~") == unop(UnaryOperator.SPREAD, ident("xs"))
    assert parse("[xs~]") == unop(UnaryOperator.SPREAD, ident("xs"))
    assert parse("xs~ + 1") == binop(
        BinaryOperator.ADD, unop(UnaryOperator.SPREAD, ident("xs")), num(1)
    )


def test_export_statement_wraps_expression() -> None:
    assert parse("#x : 1") == unop(UnaryOperator.EXPORT, define(ident("x"), num(1)))


def test_export_in_expression_binds_tightly() -> None:
    assert parse("a : #b + 1") == define(
        ident("a"),
        binop(BinaryOperator.ADD, unop(UnaryOperator.EXPORT, ident("b")), num(1)),
    )


# Statements and blocks


def test_empty_program() -> None:
    assert parse("") == block()
    assert parse("\n\n") == block()


def test_top_level_statements_form_block() -> None:
    assert parse("a\nb") == block(ident("a"), ident("b"))


def test_single_element_block_collapses() -> None:
    assert parse("[1]") == num(1)
    assert parse("{(x)}") == ident("x")


def test_empty_brackets() -> None:
    assert parse("[]") == block()


def test_bracket_block() -> None:
    assert parse("[1\n2]") == block(num(1), num(2))


def test_brackets_are_interchangeable() -> None:
    assert parse("{a\nb}") == parse("(a\nb)") == parse("[a\nb]")


def test_statements_need_separator() -> None:
    with pytest.raises(InvalidSyntax):
        parse("a b")
    with pytest.raises(InvalidSyntax):
        parse("[1 2]")


def test_unmatched_bracket() -> None:
    with pytest.raises(UnmatchedBracket) as excinfo:
        parse("[a)")
    assert excinfo.value.opening == "["
    assert excinfo.value.closing == ")"


def test_unclosed_bracket() -> None:
    with pytest.raises(UnexpectedEOF):
        parse("[a")


def test_unexpected_token() -> None:
    with pytest.raises(UnexpectedToken):
        parse("+ 1")
    with pytest.raises(UnexpectedToken):
        parse("a]")


def parse_or_none(source: str) -> ASTNode | None:
    try:
        return parse(source)
    except CompileError:
        return None


def test_deep_bracket_nesting_is_a_compile_error_or_a_value() -> None:
    result = parse_or_none("(" * 200 + "1" + ")" * 200)
    assert result is None or result == num(1)


def test_long_define_chain_is_a_compile_error_or_a_definition() -> None:
    result = parse_or_none(" : ".join(["a"] * 400))
    assert result is None or result.kind == "definition"


def test_nesting_past_recursion_limit_raises_unexpected_error() -> None:
    with pytest.raises(UnexpectedError, match="expression nesting too deep"):
        parse("[" * 5000 + "x" + "]" * 5000)


def test_missing_operand() -> None:
    with pytest.raises(UnexpectedEOF):
        parse("1 +")


def test_indented_definition_body() -> None:
    source = "f :\n  a\n  b\ng"
    assert parse(source) == block(define(ident("f"), block(ident("a"), ident("b"))), ident("g"))


def test_nested_indentation() -> None:
    source = "f :\n  g :\n    1\n  2\nh"
    assert parse(source) == block(
        define(ident("f"), block(define(ident("g"), num(1)), num(2))),
        ident("h"),
    )


def test_indented_block_statement() -> None:
    assert parse("  a\n  b") == block(ident("a"), ident("b"))


def test_unexpected_dedent() -> None:
    with pytest.raises(UnexpectedIndentation):
        Parser([Token("DEDENT", None, 1, 1), Token("EOF", "EOF", 1, 1)]).parse()


# Pattern match


def test_match_with_default() -> None:
    assert parse("f : ? 0 : 1 | 2") == match("f", (num(0), num(1)), (ident("_"), num(2)))


def test_match_binds_scrutinee() -> None:
    node = parse("n : ? 0 : 1 | n * 2")
    assert node.kind == "match"
    assert node.children == [ident("n")]


def test_match_cases_on_following_lines() -> None:
    source = "f : ?\n  0 : `zero`\n  | 1 : `one`\n  | `many`\ng"
    assert parse(source) == block(
        match(
            "f",
            (num(0), ASTNode("string", "zero")),
            (num(1), ASTNode("string", "one")),
            (ident("_"), ASTNode("string", "many")),
        ),
        ident("g"),
    )


def test_match_cases_separated_by_newlines() -> None:
    assert parse("f : ? 0 : 1\n| 2") == match("f", (num(0), num(1)), (ident("_"), num(2)))


def test_match_in_block() -> None:
    assert parse("[x : ? 1 : 2\ny]") == block(match("x", (num(1), num(2))), ident("y"))


def test_match_needs_a_case() -> None:
    with pytest.raises(UnexpectedEOF):
        parse("f : ?")


def test_indented_match_needs_dedent() -> None:
    with pytest.raises(ExpectedToken) as excinfo:
        parse("f : ?\n  0 : 1\n  2")
    assert excinfo.value.found == "2"


def test_zero_parameter_lambda_definition_in_expression() -> None:
    assert parse("(f : (? 1))") == define(ident("f"), lam([], num(1)))


# Token buffer


def test_parser_pulls_tokens_lazily() -> None:
    parser = Parser(Lexer(CharacterStream("a\nb\nc")))
    assert parser.current().type == "IDENT"
    assert len(parser.tokens) == 1


def test_checkpoint_and_rewind() -> None:
    parser = Parser(tokenize("a b c"))
    mark = parser.checkpoint()
    parser.advance()
    parser.advance()
    assert parser.current().value == "c"
    parser.rewind(mark)
    assert parser.current().value == "a"


def test_missing_eof_is_synthesized() -> None:
    assert Parser([Token("NUMBER", 7.0, 1, 1)]).parse() == num(7)


def test_advance_stops_at_eof() -> None:
    parser = Parser([])
    assert parser.advance().type == "EOF"
    assert parser.current().type == "EOF"
    assert parser.position == 0


def test_expect_reports_found_token() -> None:
    parser = Parser(tokenize("a"))
    with pytest.raises(ExpectedToken, match="Expected indented block, found a"):
        parser.expect("INDENT", "indented block")


def test_factorial_then_spread() -> None:
    assert parse("n!~") == unop(
        UnaryOperator.SPREAD, unop(UnaryOperator.FACTORIAL, ident("n"))
    )
    assert parse("-n!") == unop(
        UnaryOperator.NEGATIVE, unop(UnaryOperator.FACTORIAL, ident("n"))
    )
