"""Byte-addressed document storage for the in-process host."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, Tuple

from wordcomplete.rope import Delta

Location = Tuple[int, int]  # (row, column in code points)


def _line_starts(raw: bytes) -> Tuple[int, ...]:
    starts: List[int] = [0]
    index = raw.find(b"\n")
    while index != -1:
        starts.append(index + 1)
        index = raw.find(b"\n", index + 1)
    return tuple(starts)


@dataclass(frozen=True, slots=True)
class LocalDocument:
    """Immutable text with a line index over UTF-8 byte offsets.

    Lines keep their trailing newline; a document ending in ``"\\n"`` has a
    final empty line starting at the end of the text.
    """

    text: str = ""
    version: int = 0
    dirty: bool = False
    _raw: bytes = field(init=False, repr=False, compare=False)
    _starts: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        raw = self.text.encode("utf-8")
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_starts", _line_starts(raw))

    @classmethod
    def from_text(cls, text: str) -> "LocalDocument":
        return cls(text=text)

    @property
    def byte_length(self) -> int:
        return len(self._raw)

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def line_of_offset(self, offset: int) -> int:
        if offset < 0 or offset > self.byte_length:
            raise IndexError(f"Offset {offset} outside document of {self.byte_length} bytes")
        return bisect_right(self._starts, offset) - 1

    def offset_of_line(self, line: int) -> int:
        if line < 0 or line >= self.line_count:
            raise IndexError(f"Line {line} outside document of {self.line_count} lines")
        return self._starts[line]

    def get_line(self, line: int) -> str:
        start = self.offset_of_line(line)
        end = self._starts[line + 1] if line + 1 < self.line_count else self.byte_length
        return self._raw[start:end].decode("utf-8")

    def offset_for_location(self, location: Location) -> int:
        row, column = location
        line = self.get_line(row)
        if column < 0 or column > len(line.rstrip("\n")):
            raise IndexError(f"Column {column} outside line {row}")
        return self._starts[row] + len(line[:column].encode("utf-8"))

    def location_for_offset(self, offset: int) -> Location:
        row = self.line_of_offset(offset)
        prefix = self._raw[self._starts[row] : offset]
        return row, len(prefix.decode("utf-8"))

    def apply(self, delta: Delta) -> "LocalDocument":
        """Return a new document with ``delta`` applied and the version bumped."""

        return LocalDocument(
            text=delta.apply(self.text), version=self.version + 1, dirty=True
        )

    def mark_clean(self) -> "LocalDocument":
        return LocalDocument(text=self.text, version=self.version, dirty=False)


__all__ = ["LocalDocument", "Location"]
