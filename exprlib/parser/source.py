"""Character sources consumed by the lexer."""

from __future__ import annotations

from typing import Protocol, TextIO

# Returned by ``peek``/``read`` once the input is exhausted.
END_OF_INPUT = ""


class CharSource(Protocol):
    """A stream of single characters with one character of lookahead."""

    def peek(self) -> str:
        """Return the next character without consuming it, or ``""`` at end."""
        ...

    def read(self) -> str:
        """Consume and return the next character, or ``""`` at end."""
        ...


class StringSource:
    """Character source over an in-memory string."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def peek(self) -> str:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return END_OF_INPUT

    def read(self) -> str:
        ch = self.peek()
        if ch:
            self._pos += 1
        return ch


class TextIOSource:
    """Character source over a text stream, e.g. ``sys.stdin`` or ``io.StringIO``.

    The stream is read one character at a time; a single character is
    buffered to support ``peek``.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._buffered: str | None = None

    def peek(self) -> str:
        if self._buffered is None:
            self._buffered = self._stream.read(1)
        return self._buffered

    def read(self) -> str:
        ch = self.peek()
        self._buffered = None
        return ch
