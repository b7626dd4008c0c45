"""Lexer (tokenizer) for exprlib source code."""

from __future__ import annotations

from dataclasses import dataclass

from exprlib.parser.source import END_OF_INPUT, CharSource, StringSource
from exprlib.parser.tokens import KEYWORDS, Token, TokenKind


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


@dataclass(frozen=True)
class LexerState:
    """A buffered lookahead token and the cursor right after producing it."""

    token: Token
    line: int
    column: int
    offset: int


class Lexer:
    """Tokenize expression source lazily, one token per call.

    The lexer supports exactly one token of lookahead through ``peek``.
    Whitespace and newlines are skipped.  Unknown characters become
    INVALID tokens; the lexer itself never reports errors.
    """

    # Single-character tokens that need no lookahead.
    _SINGLE_CHAR: dict[str, TokenKind] = {
        "+": TokenKind.PLUS,
        "-": TokenKind.MINUS,
        "*": TokenKind.STAR,
        "/": TokenKind.SLASH,
        "(": TokenKind.LPAREN,
        ")": TokenKind.RPAREN,
        ".": TokenKind.PERIOD,
    }

    # Characters that may be followed by '=' to form a two-character operator.
    _WITH_EQUALS: dict[str, tuple[TokenKind, TokenKind]] = {
        "=": (TokenKind.EQUALS, TokenKind.EQUAL_EQUAL),
        "<": (TokenKind.LESS, TokenKind.LESS_EQUAL),
        ">": (TokenKind.GREATER, TokenKind.GREATER_EQUAL),
    }

    def __init__(self, source: CharSource | str, filename: str = "<input>") -> None:
        if isinstance(source, str):
            source = StringSource(source)
        self._source = source
        self._filename = filename
        self._line = 1
        self._col = 1
        self._offset = 0
        self._state: LexerState | None = None

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @property
    def line(self) -> int:
        return self._line

    @property
    def column(self) -> int:
        return self._col

    @property
    def offset(self) -> int:
        return self._offset

    # ------------------------------------------------------------------
    # Public token interface
    # ------------------------------------------------------------------

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._state is not None:
            self._line = self._state.line
            self._col = self._state.column
            self._offset = self._state.offset
            return self._state.token
        token = self._scan()
        self._state = LexerState(token, self._line, self._col, self._offset)
        return token

    def read(self) -> Token:
        """Consume and return the next token."""
        if self._state is not None:
            token = self._state.token
            self._state = None
            return token
        return self._scan()

    def is_at_end(self) -> bool:
        return self.peek().kind is TokenKind.EOF

    # ------------------------------------------------------------------
    # Character helpers
    # ------------------------------------------------------------------

    def _peek_char(self) -> str:
        return self._source.peek()

    def _advance(self) -> str:
        """Consume and return the current character, updating line/col."""
        ch = self._source.read()
        if ch == END_OF_INPUT:
            return ch
        self._offset += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _token(
        self,
        kind: TokenKind,
        start: tuple[int, int, int],
        text: str | None = None,
    ) -> Token:
        line, col, offset = start
        return Token(kind, line, col, self._offset - offset, text, offset, self._filename)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _scan(self) -> Token:
        while True:
            ch = self._peek_char()
            if ch == END_OF_INPUT:
                return Token(
                    TokenKind.EOF, self._line, self._col, 0, None, self._offset, self._filename
                )

            # --- Whitespace and newlines ---
            if ch in (" ", "\t", "\r", "\n"):
                self._advance()
                continue

            start = (self._line, self._col, self._offset)

            # --- Number literal (digits only; '.' is its own token) ---
            if _is_digit(ch):
                return self._token(TokenKind.NUMBER, start, self._scan_while(_is_digit))

            # --- Identifier / keyword ---
            if ch.isalpha() or ch == "_":
                text = self._scan_while(lambda c: c.isalnum() or c == "_")
                kind = KEYWORDS.get(text)
                if kind is not None:
                    return self._token(kind, start)
                return self._token(TokenKind.IDENTIFIER, start, text)

            self._advance()

            # --- One- or two-character operators ---
            if ch in self._WITH_EQUALS:
                single, double = self._WITH_EQUALS[ch]
                if self._peek_char() == "=":
                    self._advance()
                    return self._token(double, start)
                return self._token(single, start)

            if ch in self._SINGLE_CHAR:
                return self._token(self._SINGLE_CHAR[ch], start)

            # --- Unknown character ---
            return self._token(TokenKind.INVALID, start, ch)

    def _scan_while(self, predicate) -> str:
        chars: list[str] = []
        while True:
            ch = self._peek_char()
            if ch == END_OF_INPUT or not predicate(ch):
                break
            chars.append(self._advance())
        return "".join(chars)

    def tokenize(self) -> list[Token]:
        """Consume the remaining input. Returns a list ending with an EOF token."""
        tokens: list[Token] = []
        while True:
            tok = self.read()
            tokens.append(tok)
            if tok.kind is TokenKind.EOF:
                return tokens
