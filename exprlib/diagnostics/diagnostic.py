"""Diagnostic message representation for exprlib."""

from __future__ import annotations

from dataclasses import dataclass

from exprlib.diagnostics.kind import DiagnosticKind
from exprlib.diagnostics.location import SourceSpan


@dataclass(frozen=True)
class Diagnostic:
    """A single recoverable error found while reading an expression."""

    kind: DiagnosticKind
    message: str
    span: SourceSpan | None = None

    def __str__(self) -> str:
        loc = f"{self.span}: " if self.span else ""
        return f"{loc}{self.kind}: {self.message}"
