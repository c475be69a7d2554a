"""Maps parser byte offsets back to character offsets for error reports."""

from __future__ import annotations

from bisect import bisect_right
from typing import Final


class BytePositionMapper:
    """UTF-8 byte to character offset mapping with a checkpoint system.

    The parser scans the UTF-8 encoding of a document, while error positions
    are reported in characters of the original text. Instead of mapping every
    offset up front, the mapper records the byte offset of every
    ``checkpoint_interval``-th character and walks forward from the nearest
    checkpoint on lookup.
    """

    def __init__(self, text: str, checkpoint_interval: int = 256) -> None:
        """Initialize position mapper with checkpoint system.

        Args:
            text: The decoded document
            checkpoint_interval: Characters between checkpoints (default 256)
        """
        if checkpoint_interval <= 0:
            raise ValueError("checkpoint_interval must be positive")

        self.text: Final = text
        self.checkpoint_interval: Final = checkpoint_interval
        self._is_ascii_only: Final = text.isascii()
        # byte offset of character index * checkpoint_interval
        self._checkpoints: list[int] = []

        if not self._is_ascii_only:
            self._build_checkpoints()

    def _build_checkpoints(self) -> None:
        byte_pos = 0
        previous = 0
        for char_pos in range(0, len(self.text), self.checkpoint_interval):
            byte_pos += len(self.text[previous:char_pos].encode("utf-8"))
            self._checkpoints.append(byte_pos)
            previous = char_pos

    def byte_to_char(self, byte_pos: int) -> int:
        """Convert byte position to character position.

        Offsets inside a multi-byte character resolve to the character after
        it; offsets past the end resolve to ``len(text)``.
        """
        if self._is_ascii_only:
            return min(byte_pos, len(self.text))

        index = max(bisect_right(self._checkpoints, byte_pos) - 1, 0)
        char_pos = index * self.checkpoint_interval
        current = self._checkpoints[index] if self._checkpoints else 0

        while current < byte_pos and char_pos < len(self.text):
            current += len(self.text[char_pos].encode("utf-8"))
            char_pos += 1

        return char_pos

