"""
Strict JSON tokenizer.

Scans decoded document text into tokens one at a time. Lexical forms are
those of RFC 8259 with one restriction: numbers may not carry an exponent.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from ._config import Limits
from ._errors import LexError
from ._guard import LimitGuard
from ._location import FieldPath
from ._location import Position
from ._profile import ProfileContext
from ._utf8_mapper import UTF8PositionMapper

_WHITESPACE = " \t\n\r"
_DIGITS = "0123456789"

_NUMBER_RE = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?")
_NUMBERISH_RE = re.compile(r"[-+.0-9eE]+")
_STRING_CHUNK_RE = re.compile(r'[^"\\\x00-\x1f]+')
_HEX4_RE = re.compile(r"[0-9a-fA-F]{4}")
_WORD_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class TokenKind(Enum):
    """Kinds of token the lexer produces."""

    OBJECT_START = "{"
    OBJECT_END = "}"
    ARRAY_START = "["
    ARRAY_END = "]"
    COLON = ":"
    COMMA = ","
    STRING = "string"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    END = "end of input"


_STRUCTURAL = {
    "{": TokenKind.OBJECT_START,
    "}": TokenKind.OBJECT_END,
    "[": TokenKind.ARRAY_START,
    "]": TokenKind.ARRAY_END,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
}

_LITERALS = {
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "null": TokenKind.NULL,
}


@dataclass(frozen=True, slots=True)
class Token:
    """
    A JSON token with its source location.

    ``value`` is the decoded text of a STRING, the raw decimal text of a
    NUMBER, and the literal spelling otherwise. ``start``/``end`` are
    character indexes into the document text.
    """

    kind: TokenKind
    value: str | None
    position: Position
    start: int
    end: int

    def describe(self) -> str:
        if self.kind is TokenKind.STRING:
            return f"string {_preview(self.value or '')}"
        if self.kind is TokenKind.NUMBER:
            return f"number {self.value}"
        if self.kind is TokenKind.END:
            return "end of input"
        return f"'{self.kind.value}'"


def _preview(text: str, limit: int = 40) -> str:
    if len(text) > limit:
        text = text[:limit] + "..."
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class JsonLexer:
    """
    Tokenizes JSON text on demand.

    Each call to ``next_token`` advances past one token; there is no
    backtracking. Line and column are tracked for every token start, and
    byte offsets are kept in step with the UTF-8 encoding of the text.
    """

    def __init__(self, text: str, guard: LimitGuard | None = None) -> None:
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.guard = guard if guard is not None else LimitGuard(Limits())
        self.line = 1
        self.line_start = 0
        # UTF-8 bytes beyond one per character in text[:pos]
        self._extra_bytes = 0
        self._mapper: UTF8PositionMapper | None = None

    def _token_position(self, char_pos: int) -> Position:
        return Position(
            char_pos + self._extra_bytes,
            self.line,
            char_pos - self.line_start + 1,
        )

    def _inner_position(self, char_pos: int) -> Position:
        """Position of a character inside the token being scanned."""
        if self._mapper is None:
            self._mapper = UTF8PositionMapper(self.text)
        return Position(
            self._mapper.char_to_byte(char_pos),
            self.line,
            char_pos - self.line_start + 1,
        )

    def skip_whitespace(self) -> None:
        """Skips RFC 8259 whitespace."""
        text = self.text
        while self.pos < self.length and text[self.pos] in _WHITESPACE:
            if text[self.pos] == "\n":
                self.line += 1
                self.line_start = self.pos + 1
            self.pos += 1

    def next_token(self, path: FieldPath | None = None) -> Token:
        """Returns the next token; END once the text is exhausted."""
        self.skip_whitespace()

        start = self.pos
        position = self._token_position(start)

        if start >= self.length:
            return Token(TokenKind.END, None, position, start, start)

        char = self.text[start]
        kind = _STRUCTURAL.get(char)
        if kind is not None:
            self.pos += 1
            return Token(kind, char, position, start, self.pos)
        elif char == '"':
            return self.scan_string(position, path)
        elif char == "-" or char in _DIGITS:
            return self.scan_number(position, path)
        else:
            return self.scan_literal(position, path)

    def tokens(self) -> Iterator[Token]:
        """Yields every remaining token, ending with END."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.END:
                return

    def scan_string(
        self, position: Position, path: FieldPath | None = None
    ) -> Token:
        """Scans and decodes a string token including quotes."""
        with ProfileContext("scan_string"):
            text = self.text
            start = self.pos
            i = start + 1
            chunks: list[str] = []
            length = 0

            while True:
                match = _STRING_CHUNK_RE.match(text, i)
                if match is not None:
                    chunks.append(match.group())
                    length += match.end() - i
                    self.guard.check_string_length(length, path, position)
                    i = match.end()

                if i >= self.length:
                    raise LexError(
                        "Unterminated string",
                        position=position,
                        path=path,
                        expected='closing "',
                        actual="end of input",
                    )

                char = text[i]
                if char == '"':
                    break
                elif char == "\\":
                    decoded, i = self._scan_escape(i, position, path)
                    chunks.append(decoded)
                    length += len(decoded)
                    self.guard.check_string_length(length, path, position)
                else:
                    raise LexError(
                        "Invalid control character in string",
                        position=self._inner_position(i),
                        path=path,
                        actual=f"U+{ord(char):04X}",
                        hint="escape control characters, e.g. \\n or \\t",
                    )

            self.pos = i + 1
            raw = text[start : self.pos]
            if not raw.isascii():
                self._extra_bytes += len(raw.encode("utf-8")) - len(raw)
            return Token(
                TokenKind.STRING, "".join(chunks), position, start, self.pos
            )

    def _scan_escape(
        self, i: int, string_position: Position, path: FieldPath | None
    ) -> tuple[str, int]:
        """Decodes the escape at ``i``; returns it and the next index."""
        if i + 1 >= self.length:
            raise LexError(
                "Unterminated string",
                position=string_position,
                path=path,
                expected='closing "',
                actual="end of input",
            )

        escape = self.text[i + 1]
        simple = _ESCAPES.get(escape)
        if simple is not None:
            return simple, i + 2

        if escape != "u":
            raise LexError(
                f"Invalid escape sequence: {self.text[i : i + 2]!r}",
                position=self._inner_position(i),
                path=path,
                expected='one of \\" \\\\ \\/ \\b \\f \\n \\r \\t \\uXXXX',
                hint="escape a literal backslash as \\\\",
            )

        code = self._read_hex4(i, path)
        if 0xD800 <= code <= 0xDBFF and self.text.startswith("\\u", i + 6):
            low = self._read_hex4(i + 6, path)
            if 0xDC00 <= low <= 0xDFFF:
                pair = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                return chr(pair), i + 12
        if 0xD800 <= code <= 0xDFFF:
            raise LexError(
                "Unpaired surrogate in unicode escape",
                position=self._inner_position(i),
                path=path,
                actual=self.text[i : i + 6],
                hint="write characters outside the BMP as a surrogate pair",
            )
        return chr(code), i + 6

    def _read_hex4(self, i: int, path: FieldPath | None) -> int:
        digits = self.text[i + 2 : i + 6]
        if not _HEX4_RE.fullmatch(digits):
            raise LexError(
                f"Invalid unicode escape sequence: \\u{digits}",
                position=self._inner_position(i),
                path=path,
                expected="four hexadecimal digits",
            )
        return int(digits, 16)

    def scan_number(
        self, position: Position, path: FieldPath | None = None
    ) -> Token:
        """Scans an exponent-free JSON number token."""
        with ProfileContext("scan_number"):
            text = self.text
            start = self.pos
            numberish = _NUMBERISH_RE.match(text, start)
            actual = numberish.group() if numberish else text[start]

            match = _NUMBER_RE.match(text, start)
            if match is None:
                raise LexError(
                    "Invalid number",
                    position=position,
                    path=path,
                    expected="digits after '-'",
                    actual=repr(actual),
                )

            end = match.end()
            following = text[end] if end < self.length else ""
            if following and following in "eE":
                raise LexError(
                    "Scientific notation is not allowed",
                    position=position,
                    path=path,
                    actual=repr(actual),
                    hint="write the number in plain decimal form",
                )
            if following and following in _DIGITS:
                raise LexError(
                    "Leading zeros are not allowed",
                    position=position,
                    path=path,
                    actual=repr(actual),
                    hint="remove the leading zeros",
                )
            if following == ".":
                raise LexError(
                    "Invalid number",
                    position=position,
                    path=path,
                    expected="digits after the decimal point",
                    actual=repr(actual),
                )

            self.pos = end
            return Token(
                TokenKind.NUMBER, text[start:end], position, start, end
            )

    def scan_literal(
        self, position: Position, path: FieldPath | None = None
    ) -> Token:
        """Scans literal tokens: true, false, null."""
        text = self.text
        start = self.pos
        match = _WORD_RE.match(text, start)

        if match is not None:
            word = match.group()
            kind = _LITERALS.get(word)
            if kind is not None:
                self.pos = match.end()
                return Token(kind, word, position, start, self.pos)
            if word.lower() in _LITERALS:
                raise LexError(
                    f"Invalid literal {word!r}",
                    position=position,
                    path=path,
                    expected=word.lower(),
                    hint="literals true, false and null are lowercase",
                )
            raise LexError(
                f"Invalid literal {word!r}",
                position=position,
                path=path,
                expected="a JSON value",
                hint="quote strings and object keys with double quotes",
            )

        char = text[start]
        if char == "'":
            raise LexError(
                "Single quotes are not allowed",
                position=position,
                path=path,
                hint="use double quotes for strings and keys",
            )
        elif char == "/":
            raise LexError(
                "Comments are not allowed",
                position=position,
                path=path,
                hint="remove the comment",
            )
        elif char == "\ufeff":
            raise LexError(
                "JSON input should not contain BOM (Byte Order Mark)",
                position=position,
                path=path,
                hint="strip the byte order mark",
            )
        raise LexError(
            f"Unexpected character {char!r}",
            position=position,
            path=path,
            expected="a JSON value",
        )
