"""Recursive-descent parser for exprlib source code.

Handles:
- ``let NAME = expr``
- ``if expr then expr [else expr] end``
- Comparisons ``> < >= <= ==``, then ``+ -``, then ``* /`` (all left-associative)
- Integer and real literals (``42``, ``4.2``), identifiers, parenthesized groups

Malformed input never raises.  Each problem is recorded in the
``DiagnosticCollector`` and the parser substitutes ``Token.EMPTY`` for a
missing token or an ``ErrorExpression`` for a missing operand, then keeps
going so one call can report several problems.
"""

from __future__ import annotations

import logging

from exprlib.diagnostics.collector import DiagnosticCollector
from exprlib.diagnostics.diagnostic import Diagnostic
from exprlib.parser.ast_nodes import (
    BinaryExpression,
    ErrorExpression,
    Expression,
    IfThenExpression,
    IntegerNumberExpression,
    LetExpression,
    RealNumberExpression,
    VariableExpression,
)
from exprlib.parser.lexer import Lexer
from exprlib.parser.source import CharSource
from exprlib.parser.tokens import (
    ADDITIVE_OPERATORS,
    COMPARISON_OPERATORS,
    MULTIPLICATIVE_OPERATORS,
    Token,
    TokenKind,
)

logger = logging.getLogger(__name__)

# Deepest nesting of parentheses, let and if accepted before parsing gives up.
MAX_NESTING_DEPTH = 64

# Tokens that close an enclosing construct.  A primary that fails on one of
# these leaves it in place so the enclosing rule can still match it.
_SYNC_TOKENS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.RPAREN,
        TokenKind.THEN,
        TokenKind.ELSE,
        TokenKind.END,
        TokenKind.EOF,
    }
)


class Parser:
    """Recursive-descent parser producing one expression per call."""

    def __init__(
        self,
        lexer: Lexer | CharSource | str,
        diagnostics: DiagnosticCollector | None = None,
    ) -> None:
        if not isinstance(lexer, Lexer):
            lexer = Lexer(lexer)
        self._lexer = lexer
        self._diag = diagnostics if diagnostics is not None else DiagnosticCollector()
        self._consumed = 0
        self._depth = 0
        self._abandoned = False

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Diagnostics recorded so far, oldest first."""
        return self._diag.get_all()

    def has_errors(self) -> bool:
        return self._diag.has_errors()

    # ------------------------------------------------------------------
    # Token stream helpers
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        """Return the current token without consuming it."""
        return self._lexer.peek()

    def _at_end(self) -> bool:
        return self._lexer.is_at_end()

    def _advance(self) -> Token:
        """Consume and return the current token."""
        tok = self._lexer.read()
        if tok.kind is not TokenKind.EOF:
            self._consumed += 1
        return tok

    def _check(self, kind: TokenKind) -> bool:
        """Return True if the current token is *kind*."""
        return self._peek().kind is kind

    def _match(self, *kinds: TokenKind) -> Token | None:
        """If current token matches any of *kinds*, consume and return it."""
        for kind in kinds:
            if self._check(kind):
                return self._advance()
        return None

    def _expect(self, kind: TokenKind, what: str) -> Token:
        """Consume a token of *kind*, or report it missing and return ``Token.EMPTY``.

        INVALID tokens in the way are reported and skipped first.  Any other
        unexpected token is left in the stream.
        """
        while self._check(TokenKind.INVALID):
            self._invalid(self._advance())
        tok = self._peek()
        if tok.kind is kind:
            return self._advance()
        self._syntax_error(f"Expected {what}, got {tok.describe()}", tok)
        return Token.EMPTY

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def _syntax_error(self, message: str, tok: Token) -> None:
        if self._abandoned:
            return
        logger.debug("syntax error at %d:%d: %s", tok.line, tok.column, message)
        self._diag.syntax(message, tok.span)

    def _invalid(self, tok: Token) -> ErrorExpression:
        message = f"Invalid character {tok.text!r}"
        logger.debug("lexical error at %d:%d: %s", tok.line, tok.column, message)
        self._diag.lexical(message, tok.span)
        return ErrorExpression(token=tok, message=message)

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expression:
        """Parse the next expression from the token stream.

        Consecutive calls parse consecutive expressions.  A call always
        consumes at least one token unless the stream is at its end.
        """
        consumed = self._consumed
        self._abandoned = False
        expr = self._parse_expression()
        if self._consumed == consumed and not self._at_end():
            self._advance()
        return expr

    def expect_end(self) -> None:
        """Report every token left before EOF."""
        reported = False
        while not self._at_end():
            tok = self._advance()
            if tok.kind is TokenKind.INVALID:
                self._invalid(tok)
            elif not reported:
                self._syntax_error(f"Unexpected {tok.describe()} after expression", tok)
                reported = True

    def _parse_expression(self) -> Expression:
        if self._depth >= MAX_NESTING_DEPTH:
            return self._too_deep()
        self._depth += 1
        try:
            if self._check(TokenKind.LET):
                return self._parse_let()
            if self._check(TokenKind.IF):
                return self._parse_if()
            return self._parse_comparison()
        finally:
            self._depth -= 1

    def _too_deep(self) -> ErrorExpression:
        """Report excessive nesting and skip the rest of the input.

        Enclosing rules then find EOF where they expect ')', 'then' or 'end';
        those follow-on errors are suppressed until the next top-level call.
        """
        tok = self._peek()
        message = f"Expression is nested more than {MAX_NESTING_DEPTH} levels deep"
        self._syntax_error(message, tok)
        self._abandoned = True
        while not self._at_end():
            self._advance()
        return ErrorExpression(token=tok, message=message)

    # ------------------------------------------------------------------
    # let / if
    # ------------------------------------------------------------------

    def _parse_let(self) -> LetExpression:
        """Parse ``let NAME = expr``."""
        let_tok = self._advance()
        name_tok = self._expect(TokenKind.IDENTIFIER, "identifier after 'let'")
        equals = self._expect(TokenKind.EQUALS, "'=' after let name")
        initializer = self._parse_expression()
        return LetExpression(
            let_token=let_tok,
            name_token=name_tok,
            name=name_tok.text or "",
            equals=equals,
            initializer=initializer,
        )

    def _parse_if(self) -> IfThenExpression:
        """Parse ``if expr then expr [else expr] end``."""
        if_tok = self._advance()
        condition = self._parse_expression()
        then_tok = self._expect(TokenKind.THEN, "'then'")
        then_branch = self._parse_expression()

        else_tok = self._match(TokenKind.ELSE)
        else_branch = self._parse_expression() if else_tok is not None else None

        end_tok = self._expect(TokenKind.END, "'end'")
        return IfThenExpression(
            if_token=if_tok,
            condition=condition,
            then_token=then_tok,
            then_branch=then_branch,
            end_token=end_tok,
            else_token=else_tok or Token.EMPTY,
            else_branch=else_branch,
        )

    # ------------------------------------------------------------------
    # Binary operators (precedence climbing)
    # ------------------------------------------------------------------

    def _parse_comparison(self) -> Expression:
        """Left-associative ``>``, ``<``, ``>=``, ``<=``, ``==``."""
        return self._parse_left_assoc(COMPARISON_OPERATORS, self._parse_additive)

    def _parse_additive(self) -> Expression:
        """Left-associative ``+`` and ``-``."""
        return self._parse_left_assoc(ADDITIVE_OPERATORS, self._parse_multiplicative)

    def _parse_multiplicative(self) -> Expression:
        """Left-associative ``*`` and ``/``."""
        return self._parse_left_assoc(MULTIPLICATIVE_OPERATORS, self._parse_primary)

    def _parse_left_assoc(self, operators: frozenset[TokenKind], operand) -> Expression:
        left = operand()
        while self._peek().kind in operators:
            op_tok = self._advance()
            right = operand()
            left = BinaryExpression(left=left, operator=op_tok, right=right)
        return left

    # ------------------------------------------------------------------
    # Primaries
    # ------------------------------------------------------------------

    def _parse_primary(self) -> Expression:
        """Parse a primary expression: number, identifier, or parenthesized."""
        tok = self._peek()

        if tok.kind is TokenKind.NUMBER:
            return self._parse_number()

        if tok.kind is TokenKind.IDENTIFIER:
            self._advance()
            return VariableExpression(token=tok, name=tok.text or "")

        # Parentheses group but do not produce a node.
        if tok.kind is TokenKind.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenKind.RPAREN, "')' after expression")
            return expr

        if tok.kind is TokenKind.INVALID:
            return self._invalid(self._advance())

        message = f"Expected expression, got {tok.describe()}"
        self._syntax_error(message, tok)
        if tok.kind not in _SYNC_TOKENS:
            self._advance()
        return ErrorExpression(token=tok, message=message)

    def _parse_number(self) -> Expression:
        """Parse ``NUMBER [ '.' NUMBER ]``."""
        number = self._advance()
        separator = self._match(TokenKind.PERIOD)
        if separator is None:
            try:
                value = int(number.text or "0")
            except ValueError:
                # int() refuses digit strings beyond sys.get_int_max_str_digits().
                message = f"Integer literal too long ({number.length} digits)"
                self._syntax_error(message, number)
                return ErrorExpression(token=number, message=message)
            return IntegerNumberExpression(token=number, value=value)

        fraction = self._peek()
        if fraction.kind is not TokenKind.NUMBER:
            message = f"Expected digits after '.', got {fraction.describe()}"
            self._syntax_error(message, fraction)
            return ErrorExpression(token=separator, message=message)
        self._advance()

        if (
            separator.offset != number.offset + number.length
            or fraction.offset != separator.offset + separator.length
        ):
            self._syntax_error("Whitespace is not allowed inside a real number literal", number)

        return RealNumberExpression(
            number=number,
            separator=separator,
            fraction=fraction,
            value=float(f"{number.text}.{fraction.text}"),
        )


# ------------------------------------------------------------------
# Convenience function
# ------------------------------------------------------------------


def parse(
    source: CharSource | str, filename: str = "<input>"
) -> tuple[Expression, DiagnosticCollector]:
    """Parse exactly one expression from *source*.

    Tokens left over after the expression are reported as diagnostics.
    *filename* is recorded in every token and diagnostic span.

    Returns:
        An ``(expression_ast, diagnostics)`` tuple.
    """
    diag = DiagnosticCollector()
    parser = Parser(Lexer(source, filename), diag)
    expr = parser.parse_expression()
    parser.expect_end()
    return expr, diag
