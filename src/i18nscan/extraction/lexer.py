"""
Lexer for Go source files.

The lexer turns the raw bytes of one file into a lazy stream of tokens. It
knows just enough of the Go lexical grammar to separate code from string
literals and comments:

- interpreted strings (``"..."``) and runes (``'x'``) with escape decoding
- raw strings (backtick delimited), taken verbatim and allowed to span lines
- line and block comments, kept as tokens
- identifiers, numbers, operators and punctuation

Unterminated literals and block comments never abort the file. They produce
a single ``ERROR`` token and scanning continues behind it.

Usage Examples:
    >>> from i18nscan.extraction.lexer import Lexer
    >>> [t.text for t in Lexer('t("hi")', "main.go").tokens()]
    ['t', '(', '"hi"', ')', '']
"""

from __future__ import annotations

import logging
import re
import string
from collections.abc import Iterator

from .tokens import Position, Token, TokenKind

logger = logging.getLogger(__name__)

# Ordered longest first so a prefix never shadows a longer operator
OPERATORS: tuple[str, ...] = (
    "<<=", ">>=", "&^=", "...",
    "&&", "||", "<-", "++", "--", "==", "!=", "<=", ">=", ":=",
    "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "<<", ">>", "&^",
    "+", "-", "*", "/", "%", "&", "|", "^", "<", ">", "=", "!", "~", ":",
)

_WHITESPACE_RE = re.compile(r"\s+")
_IDENT_RE = re.compile(r"[^\W\d]\w*")
_NUMBER_RE = re.compile(r"\.?\d(?:[eEpP][+-]|[\w.])*")

_SIMPLE_ESCAPES: dict[str, str] = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}
_HEX_ESCAPE_WIDTHS: dict[str, int] = {"x": 2, "u": 4, "U": 8}
_OCTAL_DIGITS = frozenset("01234567")
_HEX_DIGITS = frozenset(string.hexdigits)

_BOM = "\ufeff"


def _encode_code_point(value: int) -> bytes:
    if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
        return "\ufffd".encode()
    return chr(value).encode()


def decode_escapes(body: str) -> str:
    """
    Decode Go escape sequences in the body of an interpreted literal.

    ``\\x`` and octal escapes produce raw bytes, which lets multi-byte UTF-8
    sequences written as escapes decode to the intended characters. Unknown
    or malformed escapes are kept as written.

    Args:
        body: Literal content without the surrounding quotes

    Returns:
        The decoded text
    """
    if "\\" not in body:
        return body

    out = bytearray()
    i = 0
    length = len(body)
    while i < length:
        ch = body[i]
        if ch != "\\" or i + 1 >= length:
            out += ch.encode("utf-8", "surrogateescape")
            i += 1
            continue

        code = body[i + 1]
        if code in _SIMPLE_ESCAPES:
            out += _SIMPLE_ESCAPES[code].encode()
            i += 2
        elif code in _HEX_ESCAPE_WIDTHS:
            width = _HEX_ESCAPE_WIDTHS[code]
            digits = body[i + 2 : i + 2 + width]
            if len(digits) == width and all(d in _HEX_DIGITS for d in digits):
                value = int(digits, 16)
                if code == "x":
                    out.append(value)
                else:
                    out += _encode_code_point(value)
                i += 2 + width
            else:
                out += b"\\"
                i += 1
        elif code in _OCTAL_DIGITS:
            digits = body[i + 1 : i + 4]
            octal = len(digits) == 3 and all(d in _OCTAL_DIGITS for d in digits)
            if octal and int(digits, 8) <= 0xFF:
                out.append(int(digits, 8))
                i += 4
            else:
                out += b"\\"
                i += 1
        else:
            out += b"\\"
            i += 1

    return out.decode("utf-8", errors="replace")


class Lexer:
    """
    Tokenizer for a single Go source file.

    Each call to :meth:`tokens` starts a fresh pass over the file, so the
    lexer can be iterated more than once.
    """

    def __init__(self, source: str | bytes, path: str = "<source>") -> None:
        """
        Initialize the lexer.

        Args:
            source: File contents, either raw bytes or already decoded text
            path: File path recorded in every token position
        """
        self.path: str = path
        self._lossy: bool = False

        if isinstance(source, bytes):
            try:
                text = source.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug(f"{path} is not valid UTF-8, invalid bytes will be replaced")
                text = source.decode("utf-8", "surrogateescape")
                self._lossy = True
        else:
            text = source

        self._start_index: int = 0
        self._start_offset: int = 0
        if text.startswith(_BOM):
            self._start_index = 1
            self._start_offset = len(_BOM.encode())

        self._text: str = text

    def tokens(self) -> Iterator[Token]:
        """Yield the tokens of the file, ending with a single EOF token."""
        run = _LexerRun(
            self._text, self.path, self._start_index, self._start_offset, self._lossy
        )
        return run.run()

    def tokenize(self) -> list[Token]:
        """Return all tokens of the file as a list."""
        return list(self.tokens())


class _LexerRun:
    """Cursor state for one pass over the source text."""

    def __init__(
        self, text: str, path: str, start_index: int, start_offset: int, lossy: bool
    ) -> None:
        self._text: str = text
        self._path: str = path
        self._lossy: bool = lossy
        self._index: int = start_index
        self._line: int = 1
        self._column: int = 1
        self._offset: int = start_offset

    def run(self) -> Iterator[Token]:
        text = self._text
        length = len(text)
        while True:
            whitespace = _WHITESPACE_RE.match(text, self._index)
            if whitespace:
                self._advance_to(whitespace.end())
            if self._index >= length:
                yield Token(TokenKind.EOF, "", self._position())
                return
            yield self._next_token()

    def _position(self) -> Position:
        return Position(self._path, self._line, self._column, self._offset)

    def _advance_to(self, end: int) -> None:
        chunk = self._text[self._index : end]
        newlines = chunk.count("\n")
        if newlines:
            self._line += newlines
            self._column = len(chunk) - chunk.rfind("\n")
        else:
            self._column += len(chunk)
        self._offset += len(chunk.encode("utf-8", "surrogateescape"))
        self._index = end

    def _emit(self, kind: TokenKind, end: int, **extra: str) -> Token:
        start = self._position()
        raw = self._text[self._index : end]
        self._advance_to(end)
        return Token(kind, raw, start, **extra)

    def _repair(self, value: str) -> str:
        if not self._lossy:
            return value
        return value.encode("utf-8", "surrogateescape").decode("utf-8", "replace")

    def _next_token(self) -> Token:
        text = self._text
        i = self._index
        ch = text[i]
        following = text[i + 1] if i + 1 < len(text) else ""

        match ch:
            case '"':
                return self._interpreted('"', TokenKind.STRING)
            case "'":
                return self._interpreted("'", TokenKind.RUNE)
            case "`":
                return self._raw()
            case "/" if following == "/":
                end = text.find("\n", i)
                return self._emit(TokenKind.COMMENT, len(text) if end == -1 else end)
            case "/" if following == "*":
                end = text.find("*/", i + 2)
                if end == -1:
                    return self._emit(
                        TokenKind.ERROR, len(text), error="unterminated block comment"
                    )
                return self._emit(TokenKind.COMMENT, end + 2)
            case _:
                pass

        identifier = _IDENT_RE.match(text, i)
        if identifier:
            return self._emit(TokenKind.IDENTIFIER, identifier.end())

        number = _NUMBER_RE.match(text, i)
        if number:
            return self._emit(TokenKind.NUMBER, number.end())

        for operator in OPERATORS:
            if text.startswith(operator, i):
                return self._emit(TokenKind.OPERATOR, i + len(operator))

        return self._emit(TokenKind.PUNCTUATION, i + 1)

    def _interpreted(self, quote: str, kind: TokenKind) -> Token:
        """Scan a ``"..."`` string or ``'x'`` rune starting at the cursor."""
        text = self._text
        length = len(text)
        j = self._index + 1
        while j < length:
            c = text[j]
            if c == "\\":
                # An escaped newline is not allowed, let the newline end the literal
                j += 2 if j + 1 < length and text[j + 1] != "\n" else 1
                continue
            if c == quote:
                body = text[self._index + 1 : j]
                value = self._repair(decode_escapes(body))
                return self._emit(kind, j + 1, value=value)
            if c == "\n":
                break
            j += 1

        label = "string" if kind is TokenKind.STRING else "rune"
        reached = "end of file" if j >= length else "end of line"
        return self._emit(
            TokenKind.ERROR, j, error=f"unterminated {label} literal (reached {reached})"
        )

    def _raw(self) -> Token:
        """Scan a backtick raw string starting at the cursor."""
        text = self._text
        end = text.find("`", self._index + 1)
        if end == -1:
            return self._emit(
                TokenKind.ERROR, len(text), error="unterminated raw string literal"
            )
        body = text[self._index + 1 : end]
        return self._emit(TokenKind.RAW_STRING, end + 1, value=self._repair(body))
