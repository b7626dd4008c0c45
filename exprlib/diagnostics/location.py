"""Source span tracking for exprlib diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceSpan:
    """A span of characters in expression source."""

    line: int  # 1-indexed
    column: int  # 1-indexed
    offset: int  # 0-indexed, absolute
    length: int = 0
    file: str = "<input>"

    @property
    def start(self) -> int:
        return self.offset

    @property
    def end(self) -> int:
        return self.offset + self.length

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"
