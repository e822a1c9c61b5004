"""Edit construction for uppercasing the word before a trigger character."""

from __future__ import annotations

from wordcomplete.host.view import View
from wordcomplete.rope import Delta, Interval
from wordcomplete.runtime import telemetry

from .scanner import word_at_offset

EDIT_KIND = "capitalize"
EDIT_AUTHOR = "wordcomplete"
EDIT_PRIORITY = 0
EDIT_AFTER_CURSOR = False
EDIT_VALIDATE = True

logger = telemetry.get_logger("wordcomplete.text.capitalize")


def build_capitalize_edit(view: View, end_offset: int) -> Delta:
    """Return a delta replacing the word ending at ``end_offset`` with its uppercase form.

    Uppercasing can change the byte length of non-ASCII text, so the
    replacement may be longer than the interval it replaces.
    """

    word = word_at_offset(view, end_offset)
    interval = Interval(word.start, end_offset)
    return Delta.simple_edit(interval, word.text.upper(), view.get_buffer_size())


def capitalize_word(
    view: View,
    end_offset: int,
    *,
    author: str = EDIT_AUTHOR,
    priority: int = EDIT_PRIORITY,
) -> Delta:
    """Build the capitalize edit and submit it to the host.

    Host failures propagate; callers decide whether they are best-effort.
    """

    delta = build_capitalize_edit(view, end_offset)
    logger.debug(
        "capitalize view=%s interval=%s", view.view_id, delta.summary()[0]
    )
    view.submit_edit(
        delta,
        priority,
        EDIT_AFTER_CURSOR,
        EDIT_VALIDATE,
        author,
        kind=EDIT_KIND,
    )
    return delta


__all__ = [
    "EDIT_AFTER_CURSOR",
    "EDIT_AUTHOR",
    "EDIT_KIND",
    "EDIT_PRIORITY",
    "EDIT_VALIDATE",
    "build_capitalize_edit",
    "capitalize_word",
]
