"""Diagnostic kinds for exprlib."""

from __future__ import annotations

from enum import Enum


class DiagnosticKind(Enum):
    """Which front-end stage rejected the input."""

    LEXICAL = "lexical"
    SYNTAX = "syntax"

    @property
    def title(self) -> str:
        """Capitalized name used when printing diagnostics."""
        return self.value.capitalize()

    def __str__(self) -> str:
        return self.value
