"""UTF-8 position mapping between character indexes and byte offsets."""

from __future__ import annotations

from bisect import bisect_right
from typing import Final

from ._location import Position


class UTF8PositionMapper:
    """Character-to-byte position mapping with a checkpoint system.

    Instead of storing the byte offset of every character, this mapper
    records checkpoints at regular intervals and walks forward from the
    nearest one. It is only built on error paths, when a position inside a
    token has to be reported.
    """

    def __init__(self, text: str, checkpoint_interval: int = 256) -> None:
        """Initialize position mapper with checkpoint system.

        Args:
            text: The decoded document text
            checkpoint_interval: Characters between checkpoints (default 256)
        """
        if checkpoint_interval < 1:
            raise ValueError("checkpoint_interval must be positive")

        self.text: Final = text
        self.checkpoint_interval: Final = checkpoint_interval
        self._is_ascii_only: Final = text.isascii()
        self._char_marks: list[int] = []
        self._byte_marks: list[int] = []

        if not self._is_ascii_only:
            self._build_checkpoints()

    def _build_checkpoints(self) -> None:
        """Build checkpoint mapping at regular character intervals."""
        interval = self.checkpoint_interval
        byte_pos = 0
        for char_pos in range(0, len(self.text), interval):
            self._char_marks.append(char_pos)
            self._byte_marks.append(byte_pos)
            chunk = self.text[char_pos : char_pos + interval]
            byte_pos += len(chunk.encode("utf-8"))

    def char_to_byte(self, char_pos: int) -> int:
        """Convert character position to byte position.

        Args:
            char_pos: Character position in the decoded text

        Returns:
            Byte position in the UTF-8 encoded text
        """
        if char_pos < 0:
            raise ValueError("char_pos must be non-negative")

        # Fast path for ASCII-only text
        if self._is_ascii_only or not self._char_marks:
            return char_pos

        i = bisect_right(self._char_marks, char_pos) - 1
        mark_char = self._char_marks[i]
        mark_byte = self._byte_marks[i]
        return mark_byte + len(self.text[mark_char:char_pos].encode("utf-8"))


def position_of_byte(data: bytes, offset: int) -> Position:
    """
    Locate a byte offset in a payload that may not be valid UTF-8.

    Used for reporting encoding errors, where no decoded text exists. The
    column counts the characters before ``offset`` on its line.
    """
    line = data.count(b"\n", 0, offset) + 1
    line_start = data.rfind(b"\n", 0, offset) + 1
    prefix = data[line_start:offset].decode("utf-8", errors="replace")
    return Position(offset=offset, line=line, column=len(prefix) + 1)


def position_of_char(text: str, index: int) -> Position:
    """Locate a character index of ``text``, which is valid up to ``index``."""
    prefix = text[:index]
    line_start = prefix.rfind("\n") + 1
    return Position(
        offset=len(prefix.encode("utf-8")),
        line=prefix.count("\n") + 1,
        column=index - line_start + 1,
    )
