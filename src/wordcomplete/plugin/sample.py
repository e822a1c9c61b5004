"""The word-complete plugin: capitalize on ``!`` and complete words from the document."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from wordcomplete.host.view import HostError, View
from wordcomplete.rope import Delta
from wordcomplete.runtime import telemetry
from wordcomplete.text.capitalize import EDIT_AUTHOR, EDIT_PRIORITY, capitalize_word
from wordcomplete.text.completion import CompletionResponse, word_completions
from wordcomplete.text.scanner import ScanError

from .base import Plugin

DEFAULT_TRIGGER = "!"


class WordCompletePlugin(Plugin):
    """Uppercases the preceding word when ``trigger`` is typed and offers word completions."""

    name = "wordcomplete"

    def __init__(
        self,
        *,
        trigger: str = DEFAULT_TRIGGER,
        author: str = EDIT_AUTHOR,
        priority: int = EDIT_PRIORITY,
    ) -> None:
        if not trigger:
            raise ValueError("trigger cannot be empty")
        self.trigger = trigger
        self.author = author
        self.priority = priority
        self.logger = telemetry.get_logger("wordcomplete.plugin")

    def new_view(self, view: View) -> None:
        self.logger.info("new view %s", view.view_id)

    def did_close(self, view: View) -> None:
        self.logger.info("close view %s", view.view_id)

    def did_save(self, view: View, old_path: Optional[Path]) -> None:
        self.logger.info("saved view %s", view.view_id)

    def config_changed(self, view: View, changes: Mapping[str, Any]) -> None:
        self.logger.debug("config changed view=%s keys=%s", view.view_id, sorted(changes))

    def update(
        self,
        view: View,
        delta: Optional[Delta],
        edit_type: str,
        author: str,
    ) -> None:
        if delta is None:
            return
        interval, _ = delta.summary()
        if delta.as_simple_insert() != self.trigger:
            return
        try:
            capitalize_word(
                view, interval.end, author=self.author, priority=self.priority
            )
        except (HostError, ScanError) as exc:
            self.logger.debug("capitalize skipped view=%s: %s", view.view_id, exc)

    def completions(
        self, view: View, request_id: int, offset: int
    ) -> CompletionResponse:
        self.logger.info("completions called : pos=%d", offset)
        return CompletionResponse(
            is_incomplete=False,
            can_resolve=False,
            items=word_completions(view, offset),
        )


__all__ = ["DEFAULT_TRIGGER", "WordCompletePlugin"]
