"""Exception types raised by exprlib."""

from __future__ import annotations

from typing import Sequence

from exprlib.diagnostics.diagnostic import Diagnostic
from exprlib.diagnostics.location import SourceSpan


class ExprlibError(Exception):
    """Base class for exprlib failures."""


class EvaluationError(ExprlibError):
    """Raised when an evaluator fails at runtime (unknown name, division by zero)."""

    def __init__(self, message: str, span: SourceSpan | None = None) -> None:
        super().__init__(message)
        self.span = span


class CodeGenerationError(ExprlibError):
    """Raised when asked to compile a tree that has diagnostics or error nodes."""

    def __init__(self, message: str, diagnostics: Sequence[Diagnostic] = ()) -> None:
        super().__init__(message)
        self.diagnostics = tuple(diagnostics)


class ConfigError(ExprlibError):
    """Raised for an unreadable or invalid configuration file."""
