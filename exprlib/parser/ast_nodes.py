"""AST node types for the exprlib parser.

Every node keeps the tokens it was built from so diagnostics and runtime
errors can point back into the source.  The set of node types is closed:
``Expression`` lists all of them, and consumers dispatch with
``isinstance`` over that union.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import Iterator, Union

from exprlib.diagnostics.location import SourceSpan
from exprlib.parser.tokens import SYMBOLS, Token


class ExprNode(ABC):
    """Base type for expression nodes. All concrete subclasses are frozen dataclasses."""


class NumberExpression(ExprNode):
    """Base type for numeric literals."""


@dataclass(frozen=True)
class IntegerNumberExpression(NumberExpression):
    """Integer literal: 2, 42, 1000000."""

    token: Token
    value: int

    @property
    def span(self) -> SourceSpan:
        return self.token.span


@dataclass(frozen=True)
class RealNumberExpression(NumberExpression):
    """Real literal ``4.2``: integer digits, ``.`` separator, fraction digits."""

    number: Token
    separator: Token
    fraction: Token
    value: float

    @property
    def span(self) -> SourceSpan:
        start = self.number.span
        return SourceSpan(
            line=start.line,
            column=start.column,
            offset=start.offset,
            length=self.number.length + self.separator.length + self.fraction.length,
            file=start.file,
        )


@dataclass(frozen=True)
class BinaryExpression(ExprNode):
    """Binary operation: left op right."""

    left: Expression
    operator: Token
    right: Expression

    @property
    def op(self) -> str:
        return SYMBOLS.get(self.operator.kind, "")

    @property
    def span(self) -> SourceSpan:
        return self.operator.span


@dataclass(frozen=True)
class VariableExpression(ExprNode):
    """Reference to a name bound by ``let``."""

    token: Token
    name: str

    @property
    def span(self) -> SourceSpan:
        return self.token.span


@dataclass(frozen=True)
class IfThenExpression(ExprNode):
    """``if cond then expr [else expr] end``."""

    if_token: Token
    condition: Expression
    then_token: Token
    then_branch: Expression
    end_token: Token
    else_token: Token = Token.EMPTY
    else_branch: Expression | None = None

    @property
    def span(self) -> SourceSpan:
        return self.if_token.span


@dataclass(frozen=True)
class LetExpression(ExprNode):
    """``let NAME = expr``."""

    let_token: Token
    name_token: Token
    name: str
    equals: Token
    initializer: Expression

    @property
    def span(self) -> SourceSpan:
        return self.let_token.span


@dataclass(frozen=True)
class ErrorExpression(ExprNode):
    """Placeholder for input the parser could not make sense of."""

    token: Token
    message: str

    @property
    def span(self) -> SourceSpan:
        return self.token.span


Expression = Union[
    IntegerNumberExpression,
    RealNumberExpression,
    BinaryExpression,
    VariableExpression,
    IfThenExpression,
    LetExpression,
    ErrorExpression,
]


def _parts(expr: Expression) -> tuple[Expression | Token, ...]:
    """Tokens and subexpressions directly held by *expr*, in source order."""
    if isinstance(expr, (IntegerNumberExpression, VariableExpression, ErrorExpression)):
        return (expr.token,)
    if isinstance(expr, RealNumberExpression):
        return (expr.number, expr.separator, expr.fraction)
    if isinstance(expr, BinaryExpression):
        return (expr.left, expr.operator, expr.right)
    if isinstance(expr, IfThenExpression):
        parts: tuple[Expression | Token, ...] = (
            expr.if_token,
            expr.condition,
            expr.then_token,
            expr.then_branch,
        )
        if expr.else_branch is not None:
            parts += (expr.else_token, expr.else_branch)
        return parts + (expr.end_token,)
    if isinstance(expr, LetExpression):
        return (expr.let_token, expr.name_token, expr.equals, expr.initializer)
    raise TypeError(f"Not an expression node: {type(expr).__name__}")


def iter_tokens(expr: Expression) -> Iterator[Token]:
    """Yield every token stored in *expr* and its subtrees, in source order.

    The walk uses an explicit stack, so trees deeper than the interpreter's
    recursion limit (long operator chains) are fine.
    """
    stack: list[Expression | Token] = [expr]
    while stack:
        item = stack.pop()
        if isinstance(item, Token):
            yield item
        else:
            stack.extend(reversed(_parts(item)))


def iter_nodes(expr: Expression) -> Iterator[Expression]:
    """Yield *expr* and all of its subexpressions, parents first."""
    stack: list[Expression] = [expr]
    while stack:
        node = stack.pop()
        yield node
        children = [part for part in _parts(node) if not isinstance(part, Token)]
        stack.extend(reversed(children))
