"""Textual-independent controller that drives the plugin from an editor widget."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from wordcomplete.host import EditRequest, LocalHost, Location
from wordcomplete.rope import Delta, Interval
from wordcomplete.text.completion import CompletionItem


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_text: Callable[[str], None]
    show_completions: Callable[[Sequence[CompletionItem]], None] = _noop
    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


def diff_delta(before: str, after: str) -> Delta:
    """Describe the change from ``before`` to ``after`` as a single replacement."""

    limit = min(len(before), len(after))
    prefix = 0
    while prefix < limit and before[prefix] == after[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < limit - prefix
        and before[len(before) - 1 - suffix] == after[len(after) - 1 - suffix]
    ):
        suffix += 1

    start = len(before[:prefix].encode("utf-8"))
    removed = before[prefix : len(before) - suffix]
    inserted = after[prefix : len(after) - suffix]
    interval = Interval(start, start + len(removed.encode("utf-8")))
    return Delta.simple_edit(interval, inserted, len(before.encode("utf-8")))


class TextualPluginAdapter:
    """Bridges a text widget to a :class:`LocalHost` view."""

    def __init__(self, host: LocalHost, view_id: str, hooks: TextualUIHooks) -> None:
        self.host = host
        self.view_id = view_id
        self.hooks = hooks
        self._completions: List[CompletionItem] = []

    @property
    def view(self):
        return self.host.get_view(self.view_id)

    @property
    def completions(self) -> Sequence[CompletionItem]:
        return tuple(self._completions)

    def handle_text_change(self, new_text: str) -> List[EditRequest]:
        """Forward a widget edit to the plugin; refresh the widget if the plugin edited."""

        old_text = self.view.text
        if new_text == old_text:
            return []
        delta = diff_delta(old_text, new_text)
        self._log("edit ->", summary=delta.summary(), insert=delta.as_simple_insert())
        plugin_edits = self.host.edit(self.view_id, delta)
        if plugin_edits:
            self.hooks.update_text(self.view.text)
            self.hooks.update_status(
                f"{plugin_edits[-1].kind} by {plugin_edits[-1].author}"
            )
        self._dismiss_completions()
        return plugin_edits

    def request_completions(self, location: Location) -> Sequence[CompletionItem]:
        offset = self.view.document.offset_for_location(location)
        response = self.host.complete(self.view_id, offset)
        self._completions = list(response.items)
        self._log("completions <-", offset=offset, count=len(self._completions))
        self.hooks.show_completions(self.completions)
        self.hooks.update_status(f"{len(self._completions)} completion(s)")
        return self.completions

    def accept_completion(self, index: int) -> Optional[Location]:
        """Apply the chosen completion and return the cursor location after it."""

        try:
            item = self._completions[index]
        except IndexError:
            return None
        self.host.accept(self.view_id, item)
        self._dismiss_completions()
        self.hooks.update_text(self.view.text)
        self.hooks.update_status(f"completed {item.label}")
        if item.edit is None:
            return None
        replacement = item.edit.replacements[0]
        end = replacement.interval.start + replacement.inserted_len
        return self.view.document.location_for_offset(end)

    def _dismiss_completions(self) -> None:
        if self._completions:
            self._completions = []
            self.hooks.show_completions(())

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix, f"view={self.view_id!r}"]
        parts.extend(f"{key}={value!r}" for key, value in fields.items())
        self.hooks.log(" ".join(parts))


__all__ = ["TextualPluginAdapter", "TextualUIHooks", "diff_delta"]
