"""
Error taxonomy for strict decoding.

Every failure is terminal for the current call. Errors carry the field path,
source position, an expected-vs-found description and, where one exists, a
one-line remediation hint.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

from ._location import FieldPath
from ._location import Position


class ErrorKind(Enum):
    """Kinds of failure a decode or registration can end with."""

    LEX_ERROR = "LexError"
    SYNTAX_ERROR = "SyntaxError"
    DUPLICATE_FIELD = "DuplicateField"
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"
    NESTING_TOO_DEEP = "NestingTooDeep"
    ARRAY_TOO_LARGE = "ArrayTooLarge"
    STRING_TOO_LONG = "StringTooLong"
    TYPE_MISMATCH = "TypeMismatch"
    UNEXPECTED_NULL = "UnexpectedNull"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    UNKNOWN_FIELD = "UnknownField"
    INVALID_DATE_FORMAT = "InvalidDateFormat"
    SCHEMA_ERROR = "SchemaError"
    CANCELLED = "Cancelled"


class JSONError(Exception):
    """
    Root of all jstrict errors.

    Holds the structured context of a failure; ``str()`` renders it as a
    single human-readable line.
    """

    kind: ClassVar[ErrorKind]

    def __init__(
        self,
        msg: str,
        *,
        position: Position | None = None,
        path: FieldPath | None = None,
        expected: str | None = None,
        actual: str | None = None,
        hint: str | None = None,
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")

        self.msg = msg
        self.position = position
        self.path = path
        self.expected = expected
        self.actual = actual
        self.hint = hint

        super().__init__(self._render())

    @property
    def pos(self) -> int:
        """Byte offset of the failure, 0 when no position applies."""
        return self.position.offset if self.position else 0

    @property
    def lineno(self) -> int:
        return self.position.line if self.position else 1

    @property
    def colno(self) -> int:
        return self.position.column if self.position else 1

    def _render(self) -> str:
        text = self.msg
        if self.path is not None:
            text += f" at {self.path}"
        if self.position is not None:
            separator = ", " if self.path else " at "
            text += f"{separator}{self.position}"
        if self.expected is not None or self.actual is not None:
            details = []
            if self.expected is not None:
                details.append(f"expected {self.expected}")
            if self.actual is not None:
                details.append(f"found {self.actual}")
            text += ": " + ", ".join(details)
        if self.hint:
            text += f". Hint: {self.hint}"
        return text


class JSONDecodeError(JSONError, ValueError):
    """Base for failures caused by the input document."""


class LexError(JSONDecodeError):
    """Malformed token: bad escape, invalid UTF-8, disallowed number form."""

    kind = ErrorKind.LEX_ERROR


class JSONSyntaxError(JSONDecodeError):
    """Grammar violation in an otherwise well-formed token stream."""

    kind = ErrorKind.SYNTAX_ERROR


class DuplicateField(JSONSyntaxError):
    """The same key appears twice in one object."""

    kind = ErrorKind.DUPLICATE_FIELD


class LimitExceeded(JSONDecodeError):
    """A resource ceiling was crossed."""


class PayloadTooLarge(LimitExceeded):
    kind = ErrorKind.PAYLOAD_TOO_LARGE


class NestingTooDeep(LimitExceeded):
    kind = ErrorKind.NESTING_TOO_DEEP


class ArrayTooLarge(LimitExceeded):
    kind = ErrorKind.ARRAY_TOO_LARGE


class StringTooLong(LimitExceeded):
    kind = ErrorKind.STRING_TOO_LONG


class BindError(JSONDecodeError):
    """The document is valid JSON but does not match the schema."""


class TypeMismatch(BindError):
    kind = ErrorKind.TYPE_MISMATCH


class UnexpectedNull(BindError):
    kind = ErrorKind.UNEXPECTED_NULL


class MissingRequiredField(BindError):
    kind = ErrorKind.MISSING_REQUIRED_FIELD


class UnknownField(BindError):
    kind = ErrorKind.UNKNOWN_FIELD


class InvalidDateFormat(BindError):
    kind = ErrorKind.INVALID_DATE_FORMAT


class Cancelled(JSONError):
    """The caller's deadline expired or cancellation was requested."""

    kind = ErrorKind.CANCELLED


class SchemaError(JSONError):
    """
    The schema graph is invalid.

    Raised once at registration/compile time; embedding applications should
    treat it as fatal at startup.
    """

    kind = ErrorKind.SCHEMA_ERROR
