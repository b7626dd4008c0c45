"""Tests for the exprlib parser."""

from __future__ import annotations

import pytest

from exprlib.diagnostics import DiagnosticKind
from exprlib.parser.ast_nodes import (
    BinaryExpression,
    ErrorExpression,
    IfThenExpression,
    IntegerNumberExpression,
    LetExpression,
    NumberExpression,
    RealNumberExpression,
    VariableExpression,
)
from exprlib.parser.lexer import Lexer
from exprlib.parser.parser import MAX_NESTING_DEPTH, Parser, parse
from exprlib.parser.tokens import Token, TokenKind

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_ok(source: str):
    """Parse *source* and assert no diagnostics."""
    expr, diag = parse(source)
    assert not diag.has_errors(), diag.format_all()
    return expr


def parse_errors(source: str):
    """Parse *source* and return the list of diagnostics (asserting some exist)."""
    _, diag = parse(source)
    assert diag.has_errors(), f"expected diagnostics for {source!r}"
    return diag.get_all()


def shape(expr) -> object:
    """Render an expression as nested tuples for structural comparisons."""
    if isinstance(expr, NumberExpression):
        return expr.value
    if isinstance(expr, VariableExpression):
        return expr.name
    if isinstance(expr, BinaryExpression):
        return (expr.op, shape(expr.left), shape(expr.right))
    raise AssertionError(f"unexpected node {expr!r}")


# ---------------------------------------------------------------------------
# Number literals
# ---------------------------------------------------------------------------


class TestNumbers:
    def test_int_number_expression(self) -> None:
        expr = parse_ok("2")
        assert isinstance(expr, IntegerNumberExpression)
        assert expr.token != Token.EMPTY
        assert expr.value == 2

    def test_int_two_digits(self) -> None:
        expr = parse_ok("42")
        assert isinstance(expr, IntegerNumberExpression)
        assert expr.value == 42

    @pytest.mark.parametrize("digits", ["0", "7", "007", "123456789", "98765432109876543210"])
    def test_int_value_matches_digits(self, digits: str) -> None:
        expr = parse_ok(digits)
        assert isinstance(expr, IntegerNumberExpression)
        assert expr.value == int(digits)
        assert expr.token.text == digits

    def test_real_number_expression(self) -> None:
        expr = parse_ok("4.2")
        assert isinstance(expr, RealNumberExpression)
        assert expr.number != Token.EMPTY
        assert expr.separator != Token.EMPTY
        assert expr.fraction != Token.EMPTY
        assert expr.value == 4.2

    @pytest.mark.parametrize(
        "source,value",
        [("0.5", 0.5), ("10.25", 10.25), ("3.14159", 3.14159), ("1.05", 1.05)],
    )
    def test_real_values(self, source: str, value: float) -> None:
        expr = parse_ok(source)
        assert isinstance(expr, RealNumberExpression)
        assert expr.value == value

    def test_real_token_spans(self) -> None:
        expr = parse_ok("12.75")
        assert (expr.number.column, expr.separator.column, expr.fraction.column) == (1, 3, 4)
        assert expr.span.length == 5

    def test_real_is_number_expression(self) -> None:
        assert isinstance(parse_ok("1.5"), NumberExpression)
        assert isinstance(parse_ok("1"), NumberExpression)


# ---------------------------------------------------------------------------
# Binary expressions
# ---------------------------------------------------------------------------


class TestBinary:
    def test_binary_expression(self) -> None:
        expr = parse_ok("4 + 3.2")
        assert isinstance(expr, BinaryExpression)
        assert expr.operator != Token.EMPTY
        assert isinstance(expr.left, NumberExpression)
        assert isinstance(expr.right, NumberExpression)

    def test_multiplication_binds_tighter(self) -> None:
        assert shape(parse_ok("2 + 3 * 4")) == ("+", 2, ("*", 3, 4))

    def test_multiplication_first(self) -> None:
        assert shape(parse_ok("2 * 3 + 4")) == ("+", ("*", 2, 3), 4)

    def test_left_associative_subtraction(self) -> None:
        assert shape(parse_ok("8 - 3 - 2")) == ("-", ("-", 8, 3), 2)

    def test_left_associative_division(self) -> None:
        assert shape(parse_ok("8 / 4 / 2")) == ("/", ("/", 8, 4), 2)

    def test_parentheses_override_precedence(self) -> None:
        assert shape(parse_ok("(2 + 3) * 4")) == ("*", ("+", 2, 3), 4)

    def test_nested_parentheses(self) -> None:
        assert shape(parse_ok("((1))")) == 1

    def test_comparison_binds_loosest(self) -> None:
        assert shape(parse_ok("1 + 2 > 3 * 4")) == (">", ("+", 1, 2), ("*", 3, 4))

    def test_comparisons_left_associative(self) -> None:
        assert shape(parse_ok("1 < 2 == 1")) == ("==", ("<", 1, 2), 1)

    @pytest.mark.parametrize("op", [">", "<", ">=", "<=", "=="])
    def test_comparison_operators(self, op: str) -> None:
        assert shape(parse_ok(f"a {op} b")) == (op, "a", "b")

    def test_variables(self) -> None:
        expr = parse_ok("x * y")
        assert isinstance(expr.left, VariableExpression)
        assert expr.left.name == "x"
        assert expr.right.name == "y"


# ---------------------------------------------------------------------------
# if / let
# ---------------------------------------------------------------------------


class TestIfThen:
    def test_if_expression(self) -> None:
        expr = parse_ok("if x > 2 then 2 end")
        assert isinstance(expr, IfThenExpression)
        assert expr.condition is not None
        assert expr.then_branch is not None
        assert expr.else_branch is None
        assert shape(expr.condition) == (">", "x", 2)
        assert shape(expr.then_branch) == 2

    def test_if_else(self) -> None:
        expr = parse_ok("if 0 then 1 else 2 end")
        assert isinstance(expr, IfThenExpression)
        assert shape(expr.else_branch) == 2
        assert expr.else_token.kind == TokenKind.ELSE

    def test_if_across_lines(self) -> None:
        expr = parse_ok("if x > 2 then\n    x\nend")
        assert isinstance(expr, IfThenExpression)
        assert expr.end_token.line == 3

    def test_nested_if(self) -> None:
        expr = parse_ok("if 1 then if 0 then 1 end else 3 end")
        assert isinstance(expr.then_branch, IfThenExpression)
        assert shape(expr.else_branch) == 3

    def test_if_inside_binary_requires_parens(self) -> None:
        expr = parse_ok("1 + (if 1 then 2 end)")
        assert isinstance(expr.right, IfThenExpression)


class TestLet:
    def test_let_expression(self) -> None:
        expr = parse_ok("let x = 2 > 3")
        assert isinstance(expr, LetExpression)
        assert expr.name == "x"
        assert shape(expr.initializer) == (">", 2, 3)

    def test_let_tokens(self) -> None:
        expr = parse_ok("let total = 1")
        assert expr.let_token.kind == TokenKind.LET
        assert expr.name_token.text == "total"
        assert expr.equals.kind == TokenKind.EQUALS

    def test_let_in_parentheses(self) -> None:
        expr = parse_ok("(let x = 2) * x")
        assert isinstance(expr, BinaryExpression)
        assert isinstance(expr.left, LetExpression)


# ---------------------------------------------------------------------------
# Consecutive expressions
# ---------------------------------------------------------------------------


class TestConsecutive:
    def test_two_expressions_from_one_parser(self) -> None:
        source = "\nlet x = 2\nif x > 2 then\n    x\nend\n"
        lexer = Lexer(source)
        parser = Parser(lexer)
        first = parser.parse_expression()
        second = parser.parse_expression()
        assert isinstance(first, LetExpression)
        assert isinstance(second, IfThenExpression)
        assert not parser.has_errors()
        assert lexer.is_at_end()

    def test_parser_accepts_plain_string(self) -> None:
        parser = Parser("1 2")
        assert parser.parse_expression().value == 1
        assert parser.parse_expression().value == 2

    def test_call_always_makes_progress(self) -> None:
        lexer = Lexer(") ) 1")
        parser = Parser(lexer)
        results = []
        while not lexer.is_at_end():
            results.append(parser.parse_expression())
        assert len(results) == 3
        assert isinstance(results[-1], IntegerNumberExpression)
        assert len(parser.diagnostics) == 2


# ---------------------------------------------------------------------------
# Diagnostics and recovery
# ---------------------------------------------------------------------------


class TestDiagnostics:
    def test_if_missing_then(self) -> None:
        diags = parse_errors("if x > 2 2 end")
        assert len(diags) == 1
        assert diags[0].kind == DiagnosticKind.SYNTAX
        assert "'then'" in diags[0].message
        assert diags[0].span.column == 10

    def test_missing_then_keeps_parsing(self) -> None:
        expr, diag = parse("if x > 2 2 end")
        assert isinstance(expr, IfThenExpression)
        assert expr.then_token == Token.EMPTY
        assert shape(expr.then_branch) == 2
        assert expr.end_token.kind == TokenKind.END

    def test_multiple_diagnostics_in_one_call(self) -> None:
        diags = parse_errors("if 1 2")
        messages = [d.message for d in diags]
        assert any("'then'" in m for m in messages)
        assert any("'end'" in m for m in messages)

    def test_let_missing_equals(self) -> None:
        diags = parse_errors("let x 2")
        assert "'='" in diags[0].message
        assert "NUMBER '2'" in diags[0].message

    def test_let_missing_name(self) -> None:
        expr, diag = parse("let = 1")
        assert isinstance(expr, LetExpression)
        assert expr.name_token == Token.EMPTY
        assert "identifier" in diag.get_all()[0].message

    def test_missing_close_paren(self) -> None:
        diags = parse_errors("(1 + 2")
        assert "')'" in diags[0].message
        assert "end of input" in diags[0].message

    def test_missing_operand(self) -> None:
        expr, diag = parse("1 +")
        assert isinstance(expr, BinaryExpression)
        assert isinstance(expr.right, ErrorExpression)
        assert "Expected expression" in diag.get_all()[0].message

    def test_empty_input(self) -> None:
        expr, diag = parse("")
        assert isinstance(expr, ErrorExpression)
        assert diag.has_errors()

    def test_invalid_character_is_lexical(self) -> None:
        diags = parse_errors("$")
        assert diags[0].kind == DiagnosticKind.LEXICAL
        assert "'$'" in diags[0].message

    def test_invalid_character_after_expression(self) -> None:
        diags = parse_errors("2 $ 3")
        assert diags[0].kind == DiagnosticKind.LEXICAL
        assert diags[0].span.start == 2
        assert any(d.kind == DiagnosticKind.SYNTAX for d in diags)

    def test_every_invalid_character_reported(self) -> None:
        diags = parse_errors("1 + @ # 2")
        lexical = [d for d in diags if d.kind == DiagnosticKind.LEXICAL]
        assert len(lexical) == 2

    def test_trailing_tokens(self) -> None:
        diags = parse_errors("1 2")
        assert "Unexpected NUMBER '2'" in diags[0].message

    def test_fraction_missing(self) -> None:
        diags = parse_errors("4.")
        assert "digits after '.'" in diags[0].message

    def test_spaced_real_literal(self) -> None:
        diags = parse_errors("4 . 2")
        assert "Whitespace" in diags[0].message

    def test_leading_period(self) -> None:
        diags = parse_errors(".5")
        assert "Expected expression" in diags[0].message

    @pytest.mark.parametrize(
        "source",
        ["if", "let", "then", "end", "((", "1 + * 2", "if 1 then", "let x =", "4..2", ")"],
    )
    def test_malformed_input_does_not_raise(self, source: str) -> None:
        _, diag = parse(source)
        assert diag.has_errors()

    def test_diagnostics_property(self) -> None:
        parser = Parser("if 1 2")
        parser.parse_expression()
        assert len(parser.diagnostics) == 2


# ---------------------------------------------------------------------------
# Input size limits
# ---------------------------------------------------------------------------


class TestLimits:
    def test_overlong_integer_literal(self) -> None:
        expr, diag = parse("9" * 5000)
        assert isinstance(expr, ErrorExpression)
        (d,) = diag.get_all()
        assert d.kind == DiagnosticKind.SYNTAX
        assert d.message == "Integer literal too long (5000 digits)"
        assert d.span.column == 1

    def test_overlong_literal_in_operand_position(self) -> None:
        expr, diag = parse("1 + " + "9" * 5000)
        assert isinstance(expr, BinaryExpression)
        assert isinstance(expr.right, ErrorExpression)
        assert len(diag) == 1

    def test_nesting_up_to_limit(self) -> None:
        depth = MAX_NESTING_DEPTH - 1
        expr = parse_ok("(" * depth + "1" + ")" * depth)
        assert expr.value == 1

    def test_excessive_nesting_reported_once(self) -> None:
        source = "(" * 200 + "1" + ")" * 200
        expr, diag = parse(source)
        (d,) = diag.get_all()
        assert "nested more than" in d.message
        assert d.span.start == MAX_NESTING_DEPTH

    def test_excessive_if_nesting(self) -> None:
        source = "if 1 then " * 300 + "1" + " end" * 300
        _, diag = parse(source)
        assert len(diag) == 1

    def test_parser_usable_after_nesting_error(self) -> None:
        parser = Parser("(" * 100)
        parser.parse_expression()
        parser.parse_expression()
        messages = [d.message for d in parser.diagnostics]
        assert len(messages) == 2
        assert "end of input" in messages[1]

    def test_long_operator_chain(self) -> None:
        expr = parse_ok("1" + " + 1" * 3000)
        assert isinstance(expr, BinaryExpression)
        assert expr.operator.column == 3 + 4 * 2999


# ---------------------------------------------------------------------------
# File names
# ---------------------------------------------------------------------------


class TestFilename:
    def test_default_filename(self) -> None:
        _, diag = parse("1 +")
        assert str(diag.get_all()[0]).startswith("<input>:1:4: syntax:")

    def test_filename_in_diagnostics(self) -> None:
        _, diag = parse("1 +", filename="calc.expr")
        assert str(diag.get_all()[0]) == (
            "calc.expr:1:4: syntax: Expected expression, got end of input"
        )

    def test_filename_in_node_spans(self) -> None:
        expr, _ = parse("let x =\n  4.25", filename="calc.expr")
        assert expr.span.file == "calc.expr"
        assert expr.initializer.span.file == "calc.expr"
        assert str(expr.initializer.span) == "calc.expr:2:3"
