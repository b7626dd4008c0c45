"""exprlib diagnostics subpackage (Layer 0 -- zero internal dependencies)."""

from exprlib.diagnostics.collector import DiagnosticCollector
from exprlib.diagnostics.diagnostic import Diagnostic
from exprlib.diagnostics.kind import DiagnosticKind
from exprlib.diagnostics.location import SourceSpan

__all__ = ["SourceSpan", "DiagnosticKind", "Diagnostic", "DiagnosticCollector"]
