"""Diagnostic collector for accumulating messages during tokenizing and parsing."""

from __future__ import annotations

from exprlib.diagnostics.diagnostic import Diagnostic
from exprlib.diagnostics.kind import DiagnosticKind
from exprlib.diagnostics.location import SourceSpan


class DiagnosticCollector:
    """Accumulates diagnostics for the duration of one parse."""

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self):
        return iter(list(self._diagnostics))

    def lexical(self, message: str, span: SourceSpan | None = None) -> Diagnostic:
        """Record a lexical diagnostic (unrecognized input character)."""
        return self._add(Diagnostic(DiagnosticKind.LEXICAL, message, span))

    def syntax(self, message: str, span: SourceSpan | None = None) -> Diagnostic:
        """Record a syntax diagnostic (unexpected or missing token)."""
        return self._add(Diagnostic(DiagnosticKind.SYNTAX, message, span))

    def _add(self, diagnostic: Diagnostic) -> Diagnostic:
        self._diagnostics.append(diagnostic)
        return diagnostic

    def has_errors(self) -> bool:
        """Return True if any diagnostics have been recorded."""
        return bool(self._diagnostics)

    def get_all(self) -> list[Diagnostic]:
        """Return a copy of all collected diagnostics."""
        return list(self._diagnostics)

    def format_all(self) -> str:
        """Format all diagnostics as a newline-separated string."""
        return "\n".join(str(d) for d in self._diagnostics)
