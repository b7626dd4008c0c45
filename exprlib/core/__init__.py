"""exprlib core subpackage (Layer 2 -- depends on parser, diagnostics)."""

from exprlib.core.codegen import CodeGenerator, Evaluator, evaluate
from exprlib.core.environment import Environment

__all__ = [
    "CodeGenerator",
    "Evaluator",
    "Environment",
    "evaluate",
]
