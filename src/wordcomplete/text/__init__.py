"""Text analysis: word scanning, capitalization edits and completions."""

from .capitalize import build_capitalize_edit, capitalize_word
from .completion import (
    CompletionItem,
    CompletionResponse,
    complete_word,
    make_completions,
    tokenize,
    word_completions,
)
from .scanner import ScanError, Word, find_word_start, word_at_offset

__all__ = [
    "CompletionItem",
    "CompletionResponse",
    "ScanError",
    "Word",
    "build_capitalize_edit",
    "capitalize_word",
    "complete_word",
    "find_word_start",
    "make_completions",
    "tokenize",
    "word_at_offset",
    "word_completions",
]
