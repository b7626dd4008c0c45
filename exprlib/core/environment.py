"""Name bindings visible while one evaluator runs."""

from __future__ import annotations

from exprlib.diagnostics.location import SourceSpan
from exprlib.errors import EvaluationError


class Environment:
    """Mutable mapping of ``let``-bound names to values.

    Each evaluator invocation starts from a fresh environment; bindings
    never leak between invocations.
    """

    def __init__(self, bindings: dict[str, float] | None = None) -> None:
        self._values: dict[str, float] = dict(bindings or {})

    def define(self, name: str, value: float) -> None:
        """Bind *name*, replacing any earlier binding."""
        self._values[name] = value

    def lookup(self, name: str, span: SourceSpan | None = None) -> float:
        try:
            return self._values[name]
        except KeyError:
            raise EvaluationError(f"Undefined variable {name!r}", span) from None
