"""Token definitions for the exprlib lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar

from exprlib.diagnostics.location import SourceSpan


class TokenKind(Enum):
    """All token types recognized by the exprlib lexer."""

    # Literals
    NUMBER = auto()
    PERIOD = auto()  # .  (separator between integer and fraction digits)
    IDENTIFIER = auto()

    # Keywords
    LET = auto()
    IF = auto()
    THEN = auto()
    ELSE = auto()
    END = auto()

    # Arithmetic operators
    PLUS = auto()  # +
    MINUS = auto()  # -
    STAR = auto()  # *
    SLASH = auto()  # /

    # Comparison operators
    LESS = auto()  # <
    LESS_EQUAL = auto()  # <=
    GREATER = auto()  # >
    GREATER_EQUAL = auto()  # >=
    EQUAL_EQUAL = auto()  # ==

    # Delimiters
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    EQUALS = auto()  # =

    # Special
    INVALID = auto()
    EOF = auto()
    EMPTY = auto()  # "no token"; never produced by the lexer


# Keyword string -> TokenKind mapping.
# Identifiers are checked against this table during lexing.
KEYWORDS: dict[str, TokenKind] = {
    "let": TokenKind.LET,
    "if": TokenKind.IF,
    "then": TokenKind.THEN,
    "else": TokenKind.ELSE,
    "end": TokenKind.END,
}

# Source text of every fixed-spelling token, used for messages.
SYMBOLS: dict[TokenKind, str] = {
    TokenKind.PERIOD: ".",
    TokenKind.PLUS: "+",
    TokenKind.MINUS: "-",
    TokenKind.STAR: "*",
    TokenKind.SLASH: "/",
    TokenKind.LESS: "<",
    TokenKind.LESS_EQUAL: "<=",
    TokenKind.GREATER: ">",
    TokenKind.GREATER_EQUAL: ">=",
    TokenKind.EQUAL_EQUAL: "==",
    TokenKind.LPAREN: "(",
    TokenKind.RPAREN: ")",
    TokenKind.EQUALS: "=",
    **{kind: word for word, kind in KEYWORDS.items()},
}

COMPARISON_OPERATORS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.LESS,
        TokenKind.LESS_EQUAL,
        TokenKind.GREATER,
        TokenKind.GREATER_EQUAL,
        TokenKind.EQUAL_EQUAL,
    }
)
ADDITIVE_OPERATORS: frozenset[TokenKind] = frozenset({TokenKind.PLUS, TokenKind.MINUS})
MULTIPLICATIVE_OPERATORS: frozenset[TokenKind] = frozenset({TokenKind.STAR, TokenKind.SLASH})
BINARY_OPERATORS: frozenset[TokenKind] = (
    COMPARISON_OPERATORS | ADDITIVE_OPERATORS | MULTIPLICATIVE_OPERATORS
)


@dataclass(frozen=True)
class Token:
    """A single token produced by the exprlib lexer.

    ``text`` holds the raw characters for NUMBER, IDENTIFIER and INVALID
    tokens and is ``None`` for everything else.
    """

    kind: TokenKind
    line: int
    column: int
    length: int
    text: str | None = None
    offset: int = 0
    file: str = "<input>"

    EMPTY: ClassVar[Token]

    @property
    def is_empty(self) -> bool:
        return self.kind is TokenKind.EMPTY

    @property
    def lexeme(self) -> str:
        """Source spelling of the token ("" for EOF and EMPTY)."""
        if self.text is not None:
            return self.text
        return SYMBOLS.get(self.kind, "")

    @property
    def span(self) -> SourceSpan:
        return SourceSpan(
            line=self.line,
            column=self.column,
            offset=self.offset,
            length=self.length,
            file=self.file,
        )

    def describe(self) -> str:
        """Human-readable form used in diagnostics, e.g. ``NUMBER '42'``."""
        if self.kind is TokenKind.EOF:
            return "end of input"
        return f"{self.kind.name} {self.lexeme!r}"


# Line 0 never occurs in real input, so EMPTY compares unequal to every lexed token.
Token.EMPTY = Token(TokenKind.EMPTY, line=0, column=0, length=0)
