"""Source positions and field paths carried by tokens, values and errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

PathSegment: TypeAlias = str | int


@dataclass(frozen=True, slots=True)
class Position:
    """
    Location of a token in the input document.

    ``offset`` is a byte offset into the UTF-8 payload; ``line`` and
    ``column`` are 1-based, with columns counted in characters.
    """

    offset: int
    line: int
    column: int

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError("offset must be a non-negative integer")
        if self.line < 1 or self.column < 1:
            raise ValueError("line and column are 1-based")

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column} (byte {self.offset})"


@dataclass(frozen=True, slots=True)
class FieldPath:
    """
    Path from the document root to a value, e.g. ``order.items[2].sku``.

    Object members are string segments, array elements integer segments.
    """

    root: str = "$"
    segments: tuple[PathSegment, ...] = ()

    def child(self, name: str) -> FieldPath:
        return FieldPath(self.root, (*self.segments, name))

    def index(self, i: int) -> FieldPath:
        return FieldPath(self.root, (*self.segments, i))

    @property
    def depth(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        parts = [self.root]
        for segment in self.segments:
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            else:
                parts.append(f".{segment}")
        return "".join(parts)
