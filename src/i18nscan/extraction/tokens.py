"""Token and source position types shared by the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing_extensions import override


@dataclass(frozen=True, slots=True)
class Position:
    """A location in a source file.

    Attributes:
        path: File the position belongs to
        line: 1-based line number
        column: 1-based column, counted in characters
        offset: Absolute byte offset into the UTF-8 encoded file
    """

    path: str
    line: int
    column: int
    offset: int

    @override
    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

    def as_tuple(self) -> tuple[str, int, int]:
        """Return the ``(file, line, column)`` triple used in catalog records."""
        return (self.path, self.line, self.column)


class TokenKind(Enum):
    """Lexical categories produced by the lexer."""

    IDENTIFIER = "identifier"
    STRING = "string"
    RAW_STRING = "raw_string"
    RUNE = "rune"
    NUMBER = "number"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    COMMENT = "comment"
    ERROR = "error"
    EOF = "eof"


STRING_KINDS = frozenset({TokenKind.STRING, TokenKind.RAW_STRING})
NON_CODE_KINDS = frozenset({TokenKind.COMMENT, TokenKind.ERROR, TokenKind.EOF})


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical unit.

    ``value`` holds the decoded content of interpreted string and rune
    literals and the verbatim body of raw strings. ``error`` is only set on
    ``ERROR`` tokens.
    """

    kind: TokenKind
    text: str
    position: Position
    value: str | None = None
    error: str | None = None

    def is_punct(self, text: str) -> bool:
        return self.kind is TokenKind.PUNCTUATION and self.text == text

    def is_operator(self, text: str) -> bool:
        return self.kind is TokenKind.OPERATOR and self.text == text

    @property
    def is_string(self) -> bool:
        return self.kind in STRING_KINDS
