"""Word boundary scanning over a single line of text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import regex

from wordcomplete.host.view import View

_WHITESPACE = regex.compile(r"\p{White_Space}")


class ScanError(ValueError):
    """Raised when the target offset does not fall on a character boundary of the line."""


@dataclass(frozen=True, slots=True)
class Word:
    """Span ending at a cursor: absolute start offset plus the word text."""

    start: int
    text: str

    @property
    def byte_length(self) -> int:
        return len(self.text.encode("utf-8"))


def find_word_start(line: str, target: int) -> Tuple[int, str]:
    """Scan ``line`` up to byte offset ``target``.

    Only Unicode White_Space characters separate words here; punctuation and
    the ASCII information separators (U+001C..U+001F) stay inside the word.
    Returns the byte offset (relative to the line) just past the last
    whitespace before ``target``, and the text between that offset and ``target``.
    """

    if target < 0:
        raise ScanError(f"Target offset {target} is negative")

    consumed = 0
    word_start = 0
    for char in line:
        if consumed == target:
            break
        width = len(char.encode("utf-8"))
        consumed += width
        if _WHITESPACE.match(char):
            word_start = consumed
    if consumed != target:
        raise ScanError(f"Offset {target} is not a character boundary of the line")

    raw = line.encode("utf-8")
    return word_start, raw[word_start:target].decode("utf-8")


def word_at_offset(view: View, offset: int) -> Word:
    """Resolve the word ending at document ``offset`` through host queries."""

    line_number = view.line_of_offset(offset)
    line_start = view.offset_of_line(line_number)
    relative_start, text = find_word_start(
        view.get_line(line_number), offset - line_start
    )
    return Word(start=line_start + relative_start, text=text)


__all__ = ["ScanError", "Word", "find_word_start", "word_at_offset"]
