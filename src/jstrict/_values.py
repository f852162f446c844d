"""Schema-agnostic value tree produced by the structural parser."""

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any

from ._errors import LexError
from ._location import Position


class ValueKind(Enum):
    """
    Variants of a parsed value.

    MISSING marks an absent object member and never appears in a parsed
    tree; it is distinct from an explicit NULL.
    """

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOL = "boolean"
    NULL = "null"
    MISSING = "missing"


@dataclass(frozen=True, slots=True)
class ParseValue:
    """
    One node of the parsed document.

    ``payload`` holds a ``dict[str, ParseValue]`` for objects (in document
    order), a ``list[ParseValue]`` for arrays, the decoded text for strings,
    the raw exponent-free decimal text for numbers, a ``bool`` for booleans
    and ``None`` for null and missing.
    """

    kind: ValueKind
    payload: Any = None
    position: Position | None = field(default=None, compare=False)

    @property
    def is_integral(self) -> bool:
        """True for numbers written without a fractional part."""
        return self.kind is ValueKind.NUMBER and "." not in self.payload

    def describe(self) -> str:
        """Short description used as the 'found' part of error messages."""
        kind = self.kind
        if kind is ValueKind.STRING:
            text = self.payload
            if len(text) > 40:
                text = text[:40] + "..."
            return f'string "{text}"'
        elif kind is ValueKind.NUMBER:
            return f"number {self.payload}"
        elif kind is ValueKind.BOOL:
            return f"boolean {'true' if self.payload else 'false'}"
        elif kind is ValueKind.ARRAY:
            return f"array of {len(self.payload)} elements"
        return kind.value

    def to_python(self) -> Any:
        """Converts the tree to plain ``dict``/``list``/scalar data."""
        kind = self.kind
        if kind is ValueKind.OBJECT:
            return {
                key: value.to_python() for key, value in self.payload.items()
            }
        elif kind is ValueKind.ARRAY:
            return [value.to_python() for value in self.payload]
        elif kind is ValueKind.NUMBER:
            if self.is_integral:
                try:
                    return int(self.payload)
                except ValueError as e:
                    raise LexError(
                        "Integer too large to convert",
                        position=self.position,
                        expected="a convertible integer",
                        actual=f"{len(self.payload.lstrip('-'))} digits",
                        hint="send very large integers as strings",
                    ) from e
            return float(self.payload)
        elif kind is ValueKind.MISSING:
            raise ValueError("a missing value has no Python equivalent")
        return self.payload


MISSING = ParseValue(ValueKind.MISSING)
