"""
Recursive descent parser for strict JSON.

Consumes tokens through the limit guard and materializes one complete
``ParseValue`` tree before any binding happens.
"""

import codecs
from typing import TypeAlias

from ._config import Limits
from ._errors import DuplicateField
from ._errors import JSONSyntaxError
from ._errors import LexError
from ._guard import Deadline
from ._guard import LimitGuard
from ._lexer import JsonLexer
from ._lexer import Token
from ._lexer import TokenKind
from ._location import FieldPath
from ._location import Position
from ._profile import ProfileContext
from ._utf8_mapper import position_of_byte
from ._utf8_mapper import position_of_char
from ._values import ParseValue
from ._values import ValueKind

JsonInput: TypeAlias = bytes | bytearray | memoryview | str

_SCALARS = {
    TokenKind.TRUE: (ValueKind.BOOL, True),
    TokenKind.FALSE: (ValueKind.BOOL, False),
    TokenKind.NULL: (ValueKind.NULL, None),
}


class JsonParser:
    """
    Parses a token stream into a ``ParseValue`` tree.

    Holds exactly one token of lookahead. Duplicate keys, trailing commas
    and trailing data are errors.
    """

    def __init__(self, lexer: JsonLexer) -> None:
        self.lexer = lexer
        self.guard = lexer.guard
        self.current_token: Token | None = None
        self._keys: dict[str, str] = {}

    @property
    def token(self) -> Token:
        if self.current_token is None:
            raise RuntimeError("parse() has not been started")
        return self.current_token

    def advance_token(self, path: FieldPath) -> Token:
        """Advances to next token and returns it."""
        self.current_token = self.lexer.next_token(path)
        return self.current_token

    def expect_token(self, kind: TokenKind, path: FieldPath) -> Token:
        """Expects a specific delimiter and advances past it."""
        token = self.token
        if token.kind is not kind:
            raise JSONSyntaxError(
                f"Expecting '{kind.value}' delimiter",
                position=token.position,
                path=path,
                expected=f"'{kind.value}'",
                actual=token.describe(),
            )
        self.advance_token(path)
        return token

    def parse(self) -> ParseValue:
        """Parses exactly one root value followed by end of input."""
        root = FieldPath()
        self.advance_token(root)
        value = self.parse_value(root)

        token = self.token
        if token.kind is not TokenKind.END:
            raise JSONSyntaxError(
                "Extra data",
                position=token.position,
                expected="end of input",
                actual=token.describe(),
                hint="send exactly one JSON value per document",
            )
        return value

    def parse_value(self, path: FieldPath) -> ParseValue:
        """Parses any JSON value based on current token."""
        token = self.token
        kind = token.kind

        if kind is TokenKind.STRING:
            self.advance_token(path)
            return ParseValue(ValueKind.STRING, token.value, token.position)
        elif kind is TokenKind.NUMBER:
            self.advance_token(path)
            return ParseValue(ValueKind.NUMBER, token.value, token.position)
        elif kind in _SCALARS:
            self.advance_token(path)
            value_kind, payload = _SCALARS[kind]
            return ParseValue(value_kind, payload, token.position)
        elif kind is TokenKind.OBJECT_START:
            return self.parse_object(path)
        elif kind is TokenKind.ARRAY_START:
            return self.parse_array(path)
        raise JSONSyntaxError(
            "Expecting value",
            position=token.position,
            path=path,
            expected="a JSON value",
            actual=token.describe(),
        )

    def _intern_key(self, key: str) -> str:
        """Reuses one string object for keys repeated across the document."""
        return self._keys.setdefault(key, key)

    def _parse_object_key(self, path: FieldPath) -> Token:
        """Validates the current token is a proper string key."""
        token = self.token
        if token.kind is not TokenKind.STRING:
            raise JSONSyntaxError(
                "Expecting property name enclosed in double quotes",
                position=token.position,
                path=path,
                expected="a string key",
                actual=token.describe(),
            )
        return token

    def _handle_object_continuation(self, path: FieldPath) -> bool:
        """Handles the token after a member; returns True if another follows."""
        token = self.token
        if token.kind is TokenKind.OBJECT_END:
            self.advance_token(path)
            return False
        elif token.kind is TokenKind.COMMA:
            self.advance_token(path)
            if self.token.kind is TokenKind.OBJECT_END:
                raise JSONSyntaxError(
                    "Illegal trailing comma before end of object",
                    position=token.position,
                    path=path,
                    hint="remove the comma after the last member",
                )
            return True
        raise JSONSyntaxError(
            "Expecting ',' delimiter",
            position=token.position,
            path=path,
            expected="',' or '}'",
            actual=token.describe(),
        )

    def parse_object(self, path: FieldPath) -> ParseValue:
        """Parses a JSON object, rejecting duplicate keys."""
        with ProfileContext("parse_object"):
            start = self.token
            self.guard.enter(path, start.position)
            self.advance_token(path)

            members: dict[str, ParseValue] = {}
            if self.token.kind is TokenKind.OBJECT_END:
                self.advance_token(path)
                self.guard.leave()
                return ParseValue(ValueKind.OBJECT, members, start.position)

            while True:
                key_token = self._parse_object_key(path)
                key = self._intern_key(key_token.value or "")
                member_path = path.child(key)
                if key in members:
                    raise DuplicateField(
                        f"Duplicate key {key!r}",
                        position=key_token.position,
                        path=member_path,
                        hint="each key may appear only once per object",
                    )

                self.advance_token(member_path)
                self.expect_token(TokenKind.COLON, member_path)
                self.guard.checkpoint(member_path, key_token.position)
                members[key] = self.parse_value(member_path)

                if not self._handle_object_continuation(path):
                    break

            self.guard.leave()
            return ParseValue(ValueKind.OBJECT, members, start.position)

    def parse_array(self, path: FieldPath) -> ParseValue:
        """Parses a JSON array within the element-count ceiling."""
        with ProfileContext("parse_array"):
            start = self.token
            self.guard.enter(path, start.position)
            self.advance_token(path)

            values: list[ParseValue] = []
            if self.token.kind is TokenKind.ARRAY_END:
                self.advance_token(path)
                self.guard.leave()
                return ParseValue(ValueKind.ARRAY, values, start.position)

            while True:
                index = len(values)
                element_path = path.index(index)
                self.guard.check_array_length(
                    index + 1, path, self.token.position
                )
                self.guard.checkpoint(element_path, self.token.position)
                values.append(self.parse_value(element_path))

                token = self.token
                if token.kind is TokenKind.ARRAY_END:
                    self.advance_token(path)
                    break
                elif token.kind is TokenKind.COMMA:
                    self.advance_token(path.index(index + 1))
                    if self.token.kind is TokenKind.ARRAY_END:
                        raise JSONSyntaxError(
                            "Illegal trailing comma before end of array",
                            position=token.position,
                            path=path,
                            hint="remove the comma after the last element",
                        )
                else:
                    raise JSONSyntaxError(
                        "Expecting ',' delimiter",
                        position=token.position,
                        path=path,
                        expected="',' or ']'",
                        actual=token.describe(),
                    )

            self.guard.leave()
            return ParseValue(ValueKind.ARRAY, values, start.position)


def decode_payload(data: JsonInput, guard: LimitGuard) -> str:
    """
    Validates the raw payload and returns it as text.

    Size is checked before anything is decoded. ``str`` input is measured
    by its UTF-8 encoding.
    """
    if isinstance(data, str):
        try:
            data = data.encode("utf-8")
        except UnicodeEncodeError as e:
            raise LexError(
                "Invalid unicode text: unpaired surrogate",
                position=position_of_char(data, e.start),
                actual=f"U+{ord(data[e.start]):04X}",
                hint="encode characters outside the BMP as valid code points",
            ) from e
    elif isinstance(data, bytearray | memoryview):
        data = bytes(data)
    elif not isinstance(data, bytes):
        raise TypeError(
            "the JSON object must be bytes, bytearray, memoryview or str, "
            f"not {type(data).__name__}"
        )

    guard.check_payload(len(data))

    if data.startswith(codecs.BOM_UTF8):
        raise LexError(
            "JSON input should not contain BOM (Byte Order Mark)",
            position=Position(0, 1, 1),
            hint="strip the byte order mark",
        )

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise LexError(
            "Invalid UTF-8 byte sequence",
            position=position_of_byte(data, e.start),
            actual=f"byte 0x{data[e.start]:02x}",
            hint="encode the payload as UTF-8",
        ) from e


def parse(
    data: JsonInput,
    *,
    limits: Limits | None = None,
    deadline: Deadline | None = None,
) -> ParseValue:
    """
    Parses a JSON document into a schema-agnostic ``ParseValue`` tree.

    Enforces the strict lexical rules, RFC 8259 grammar and the resource
    limits; raises a ``JSONDecodeError`` subclass on the first violation.
    """
    with ProfileContext("parse"):
        guard = LimitGuard(limits if limits is not None else Limits(), deadline)
        text = decode_payload(data, guard)
        return JsonParser(JsonLexer(text, guard)).parse()
