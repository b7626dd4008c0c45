"""Compile expression ASTs into zero-argument evaluators.

``CodeGenerator.generate`` walks the tree once and turns every node into a
closure over an ``Environment``.  The returned evaluator creates a fresh
environment each time it is called, runs the closures and returns a
``float``.  Comparisons produce ``1.0`` or ``0.0``.
"""

from __future__ import annotations

import logging
import math
import operator
from typing import Callable

from exprlib.config import EvaluatorConfig
from exprlib.core.environment import Environment
from exprlib.diagnostics.location import SourceSpan
from exprlib.errors import CodeGenerationError, EvaluationError
from exprlib.parser.ast_nodes import (
    BinaryExpression,
    ErrorExpression,
    Expression,
    IfThenExpression,
    IntegerNumberExpression,
    LetExpression,
    RealNumberExpression,
    VariableExpression,
    iter_nodes,
    iter_tokens,
)
from exprlib.parser.parser import parse
from exprlib.parser.source import CharSource
from exprlib.parser.tokens import BINARY_OPERATORS, TokenKind

logger = logging.getLogger(__name__)

Evaluator = Callable[[], float]
_Compiled = Callable[[Environment], float]


def _comparison(compare: Callable[[float, float], bool]) -> Callable[[float, float], float]:
    return lambda left, right: 1.0 if compare(left, right) else 0.0


_OPERATORS: dict[TokenKind, Callable[[float, float], float]] = {
    TokenKind.PLUS: operator.add,
    TokenKind.MINUS: operator.sub,
    TokenKind.STAR: operator.mul,
    TokenKind.LESS: _comparison(operator.lt),
    TokenKind.LESS_EQUAL: _comparison(operator.le),
    TokenKind.GREATER: _comparison(operator.gt),
    TokenKind.GREATER_EQUAL: _comparison(operator.ge),
    TokenKind.EQUAL_EQUAL: _comparison(operator.eq),
}


def _ieee_divide(left: float, right: float) -> float:
    if right != 0:
        return left / right
    if left == 0 or math.isnan(left):
        return math.nan
    return math.copysign(math.inf, left) * math.copysign(1.0, right)


class CodeGenerator:
    """Tree-walking compiler from ``Expression`` to ``Evaluator``."""

    def __init__(self, config: EvaluatorConfig | None = None) -> None:
        self._config = config or EvaluatorConfig()

    def generate(self, expr: Expression) -> Evaluator:
        """Compile *expr* into a zero-argument evaluator.

        Raises:
            CodeGenerationError: If the tree contains error placeholders or
                missing tokens left behind by parser recovery.
        """
        self._check_complete(expr)
        try:
            compiled = self._compile(expr)
        except RecursionError:
            raise CodeGenerationError(
                f"Expression at {expr.span} is nested too deeply to compile"
            ) from None
        logger.debug("compiled %s", type(expr).__name__)

        def evaluator() -> float:
            try:
                return compiled(Environment())
            except EvaluationError as e:
                logger.debug("evaluation failed: %s", e)
                raise
            except RecursionError:
                raise EvaluationError(
                    "Expression is nested too deeply to evaluate", expr.span
                ) from None

        return evaluator

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _check_complete(self, expr: Expression) -> None:
        for node in iter_nodes(expr):
            if isinstance(node, ErrorExpression):
                raise CodeGenerationError(
                    f"Cannot generate code for an erroneous expression at {node.span}: {node.message}"
                )
            if isinstance(node, BinaryExpression) and node.operator.kind not in BINARY_OPERATORS:
                raise CodeGenerationError(
                    f"Unknown binary operator {node.operator.describe()} at {node.span}"
                )
        if any(tok.is_empty for tok in iter_tokens(expr)):
            raise CodeGenerationError("Cannot generate code for an expression with missing tokens")

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def _compile(self, expr: Expression) -> _Compiled:
        if isinstance(expr, IntegerNumberExpression):
            # Converting from the digits overflows to inf instead of raising.
            value = float(expr.token.text or "0")
            return lambda env: value
        elif isinstance(expr, RealNumberExpression):
            value = expr.value
            return lambda env: value
        elif isinstance(expr, BinaryExpression):
            return self._compile_binary(expr)
        elif isinstance(expr, VariableExpression):
            name, span = expr.name, expr.span
            return lambda env: env.lookup(name, span)
        elif isinstance(expr, IfThenExpression):
            return self._compile_if(expr)
        elif isinstance(expr, LetExpression):
            return self._compile_let(expr)
        else:
            raise CodeGenerationError(f"Cannot compile expression type: {type(expr).__name__}")

    def _compile_binary(self, expr: BinaryExpression) -> _Compiled:
        # Left-associative chains nest along the left operand.  Walk that
        # spine in a loop so "1 + 1 + ... + 1" compiles and runs without
        # one Python frame per operator.
        chain: list[BinaryExpression] = []
        node: Expression = expr
        while isinstance(node, BinaryExpression):
            chain.append(node)
            node = node.left
        first = self._compile(node)
        steps = [
            (self._operator(step), self._compile(step.right)) for step in reversed(chain)
        ]

        def binary(env: Environment) -> float:
            value = first(env)
            for apply, right in steps:
                value = apply(value, right(env))
            return value

        return binary

    def _operator(self, expr: BinaryExpression) -> Callable[[float, float], float]:
        if expr.operator.kind is TokenKind.SLASH:
            return self._divide(expr.span)
        return _OPERATORS[expr.operator.kind]

    def _divide(self, span: SourceSpan) -> Callable[[float, float], float]:
        if self._config.division_by_zero == "ieee":
            return _ieee_divide

        def divide(left: float, right: float) -> float:
            if right == 0:
                raise EvaluationError("Division by zero", span)
            return left / right

        return divide

    def _compile_if(self, expr: IfThenExpression) -> _Compiled:
        condition = self._compile(expr.condition)
        then_branch = self._compile(expr.then_branch)
        if expr.else_branch is not None:
            else_branch = self._compile(expr.else_branch)
        else:
            otherwise = float(self._config.false_condition_value)

            def else_branch(env: Environment) -> float:
                return otherwise

        def if_then(env: Environment) -> float:
            if condition(env) != 0:
                return then_branch(env)
            return else_branch(env)

        return if_then

    def _compile_let(self, expr: LetExpression) -> _Compiled:
        name = expr.name
        initializer = self._compile(expr.initializer)

        def let(env: Environment) -> float:
            value = initializer(env)
            env.define(name, value)
            return value

        return let


def evaluate(source: CharSource | str, config: EvaluatorConfig | None = None) -> float:
    """Parse, compile and run a single expression.

    Raises:
        CodeGenerationError: If parsing produced diagnostics; they are
            available on the exception's ``diagnostics`` attribute.
        EvaluationError: If evaluation fails.
    """
    expr, diag = parse(source)
    if diag.has_errors():
        raise CodeGenerationError(
            f"Expression has {len(diag)} diagnostic(s)", diag.get_all()
        )
    return CodeGenerator(config).generate(expr)()
