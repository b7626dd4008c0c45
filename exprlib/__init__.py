"""exprlib: tokenizer, parser and evaluator for a tiny expression language."""

from exprlib.config import EvaluatorConfig, load_config
from exprlib.core import CodeGenerator, evaluate
from exprlib.errors import CodeGenerationError, ConfigError, EvaluationError, ExprlibError
from exprlib.parser import Lexer, Parser, parse

__version__ = "0.1.0"

__all__ = [
    "Lexer",
    "Parser",
    "parse",
    "CodeGenerator",
    "evaluate",
    "EvaluatorConfig",
    "load_config",
    "ExprlibError",
    "EvaluationError",
    "CodeGenerationError",
    "ConfigError",
]
