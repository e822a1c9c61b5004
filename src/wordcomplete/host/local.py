"""In-process host: local views plus the loop that notifies the dispatcher."""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from wordcomplete.rope import Delta, DeltaError, Interval
from wordcomplete.runtime import telemetry

from .document import LocalDocument
from .view import EditRequest, HostError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from wordcomplete.plugin.dispatcher import CallbackDispatcher
    from wordcomplete.text.completion import CompletionItem, CompletionResponse

USER_AUTHOR = "user"


class LocalView:
    """Implements the host query surface over a :class:`LocalDocument`."""

    def __init__(
        self,
        view_id: str,
        document: Optional[LocalDocument] = None,
        *,
        path: Optional[Path] = None,
    ) -> None:
        self._view_id = view_id
        self.document = document or LocalDocument()
        self.path = path
        self.closed = False
        self.submitted: List[EditRequest] = []

    @property
    def view_id(self) -> str:
        return self._view_id

    @property
    def text(self) -> str:
        return self.document.text

    def _check_open(self, method: str) -> None:
        if self.closed:
            raise HostError(
                f"View '{self._view_id}' is closed", view_id=self._view_id, method=method
            )

    def line_of_offset(self, offset: int) -> int:
        self._check_open("line_of_offset")
        try:
            return self.document.line_of_offset(offset)
        except IndexError as exc:
            raise HostError(str(exc), view_id=self._view_id, method="line_of_offset") from exc

    def offset_of_line(self, line: int) -> int:
        self._check_open("offset_of_line")
        try:
            return self.document.offset_of_line(line)
        except IndexError as exc:
            raise HostError(str(exc), view_id=self._view_id, method="offset_of_line") from exc

    def get_line(self, line: int) -> str:
        self._check_open("get_line")
        try:
            return self.document.get_line(line)
        except IndexError as exc:
            raise HostError(str(exc), view_id=self._view_id, method="get_line") from exc

    def get_document(self) -> str:
        self._check_open("get_document")
        return self.document.text

    def get_buffer_size(self) -> int:
        self._check_open("get_buffer_size")
        return self.document.byte_length

    def submit_edit(
        self,
        edit: Delta,
        priority: int,
        after_cursor: bool,
        validate: bool,
        author: str,
        *,
        kind: str = "plugin",
    ) -> None:
        self._check_open("submit_edit")
        if validate and edit.base_len != self.document.byte_length:
            raise HostError(
                f"Edit expects {edit.base_len} bytes, document has {self.document.byte_length}",
                view_id=self._view_id,
                method="submit_edit",
            )
        self.apply(edit)
        self.submitted.append(
            EditRequest(
                delta=edit,
                priority=priority,
                after_cursor=after_cursor,
                validate=validate,
                author=author,
                kind=kind,
            )
        )

    def apply(self, delta: Delta) -> LocalDocument:
        try:
            self.document = self.document.apply(delta)
        except DeltaError as exc:
            raise HostError(str(exc), view_id=self._view_id, method="apply") from exc
        return self.document


class LocalHost:
    """Owns local views and forwards user activity to a callback dispatcher."""

    def __init__(self, dispatcher: "CallbackDispatcher") -> None:
        self.dispatcher = dispatcher
        self.views: Dict[str, LocalView] = {}
        self._request_ids = itertools.count(1)
        self.logger = telemetry.get_logger("wordcomplete.host")

    def get_view(self, view_id: str) -> LocalView:
        try:
            return self.views[view_id]
        except KeyError:
            raise HostError(f"Unknown view '{view_id}'", view_id=view_id) from None

    def open(
        self, view_id: str, text: str = "", *, path: Optional[Path] = None
    ) -> LocalView:
        view = LocalView(view_id, LocalDocument.from_text(text), path=path)
        self.views[view_id] = view
        self.dispatcher.view_opened(view)
        return view

    def close(self, view_id: str) -> None:
        view = self.get_view(view_id)
        self.dispatcher.view_closed(view_id)
        view.closed = True
        del self.views[view_id]

    def save(self, view_id: str, path: Path) -> None:
        view = self.get_view(view_id)
        old_path = view.path if view.path != path else None
        path.write_text(view.text, encoding="utf-8")
        view.path = path
        view.document = view.document.mark_clean()
        self.dispatcher.view_saved(view_id, old_path)

    def change_config(self, view_id: str, changes: Mapping[str, Any]) -> None:
        self.get_view(view_id)
        self.dispatcher.config_changed(view_id, changes)

    def edit(
        self,
        view_id: str,
        delta: Delta,
        *,
        edit_type: str = "insert",
        author: str = USER_AUTHOR,
    ) -> List[EditRequest]:
        """Apply a user edit, notify the plugin, and return edits it submitted."""

        view = self.get_view(view_id)
        view.apply(delta)
        already = len(view.submitted)
        self.dispatcher.update(view_id, delta, edit_type, author)
        plugin_edits = view.submitted[already:]
        if plugin_edits:
            self.logger.debug(
                "view=%s received %d plugin edit(s)", view_id, len(plugin_edits)
            )
        return plugin_edits

    def insert(self, view_id: str, offset: int, text: str) -> List[EditRequest]:
        view = self.get_view(view_id)
        delta = Delta.simple_edit(
            Interval.empty_at(offset), text, view.document.byte_length
        )
        return self.edit(view_id, delta)

    def complete(self, view_id: str, offset: int) -> "CompletionResponse":
        self.get_view(view_id)
        return self.dispatcher.completions(view_id, next(self._request_ids), offset)

    def accept(self, view_id: str, item: "CompletionItem") -> List[EditRequest]:
        if item.edit is None:
            return []
        return self.edit(view_id, item.edit, edit_type="completion")


__all__ = ["LocalHost", "LocalView", "USER_AUTHOR"]
