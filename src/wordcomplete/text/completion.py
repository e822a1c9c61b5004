"""Prefix-based word completion drawn from the document text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional

import regex

from wordcomplete.host.view import HostError, View
from wordcomplete.rope import Delta, Interval
from wordcomplete.runtime import telemetry

from .scanner import ScanError, Word, word_at_offset

logger = telemetry.get_logger("wordcomplete.text.completion")

# Alphabetic includes combining vowel signs (Mn/Mc) such as Devanagari matras.
_TOKEN = regex.compile(r"[\p{Alphabetic}\p{N}]+")


@dataclass(slots=True)
class CompletionItem:
    """A candidate label plus the edit to apply when it is accepted."""

    label: str
    edit: Optional[Delta] = None

    @classmethod
    def with_label(cls, label: str) -> "CompletionItem":
        return cls(label=label)

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"label": self.label}
        if self.edit is not None:
            payload["edit"] = self.edit.to_json()
        return payload


@dataclass(slots=True)
class CompletionResponse:
    is_incomplete: bool = False
    can_resolve: bool = False
    items: List[CompletionItem] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "is_incomplete": self.is_incomplete,
            "can_resolve": self.can_resolve,
            "items": [item.to_json() for item in self.items],
        }


def tokenize(text: str) -> Iterator[str]:
    """Yield runs of alphabetic or numeric characters; everything else separates."""

    for match in _TOKEN.finditer(text):
        yield match.group()


def complete_word(word: str, text: str) -> List[str]:
    """Return sorted, unique tokens of ``text`` that extend ``word``."""

    if not word:
        return []
    return sorted(
        {
            token
            for token in tokenize(text)
            if token.startswith(word) and len(token) > len(word)
        }
    )


def make_completions(
    words: Iterable[str], word: Word, buffer_size: int
) -> List[CompletionItem]:
    """Pair every candidate with a delta replacing the typed prefix."""

    interval = Interval(word.start, word.start + word.byte_length)
    items = []
    for candidate in words:
        item = CompletionItem.with_label(candidate)
        item.edit = Delta.simple_edit(interval, candidate, buffer_size)
        items.append(item)
    return items


def word_completions(view: View, offset: int) -> List[CompletionItem]:
    """Completion candidates for the word ending at ``offset`` in ``view``."""

    try:
        word = word_at_offset(view, offset)
    except (HostError, ScanError) as exc:
        logger.info("completion word lookup failed: %s", exc)
        return []

    try:
        document = view.get_document()
    except HostError as exc:
        logger.info("document fetch failed: %s", exc)
        document = ""

    candidates = complete_word(word.text, document)
    if not candidates:
        return []
    logger.debug(
        "using word '%s' at %d with %d candidates", word.text, word.start, len(candidates)
    )
    try:
        buffer_size = view.get_buffer_size()
    except HostError as exc:
        logger.info("buffer size lookup failed: %s", exc)
        return []
    return make_completions(candidates, word, buffer_size)


__all__ = [
    "CompletionItem",
    "CompletionResponse",
    "complete_word",
    "make_completions",
    "tokenize",
    "word_completions",
]
