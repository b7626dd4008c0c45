"""exprlib parser subpackage (Layer 1 -- depends on diagnostics)."""

from exprlib.parser.ast_nodes import (
    BinaryExpression,
    ErrorExpression,
    Expression,
    ExprNode,
    IfThenExpression,
    IntegerNumberExpression,
    LetExpression,
    NumberExpression,
    RealNumberExpression,
    VariableExpression,
)
from exprlib.parser.lexer import Lexer
from exprlib.parser.parser import Parser, parse
from exprlib.parser.source import CharSource, StringSource, TextIOSource
from exprlib.parser.tokens import Token, TokenKind

__all__ = [
    "TokenKind",
    "Token",
    "CharSource",
    "StringSource",
    "TextIOSource",
    "Lexer",
    "ExprNode",
    "Expression",
    "NumberExpression",
    "IntegerNumberExpression",
    "RealNumberExpression",
    "BinaryExpression",
    "VariableExpression",
    "IfThenExpression",
    "LetExpression",
    "ErrorExpression",
    "Parser",
    "parse",
]
