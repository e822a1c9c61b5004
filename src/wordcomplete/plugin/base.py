"""Base class every plugin implements to receive host callbacks."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from wordcomplete.host.view import View
from wordcomplete.rope import Delta
from wordcomplete.text.completion import CompletionResponse


class Plugin:
    """Callback contract with default no-op implementations.

    Subclasses override only the callbacks they care about. The ``view``
    passed to each callback is borrowed and must not be kept past its return.
    """

    name: str = "plugin"

    def new_view(self, view: View) -> None:  # pragma: no cover - default no-op
        del view

    def did_close(self, view: View) -> None:  # pragma: no cover - default no-op
        del view

    def did_save(
        self, view: View, old_path: Optional[Path]
    ) -> None:  # pragma: no cover - default no-op
        del view, old_path

    def config_changed(
        self, view: View, changes: Mapping[str, Any]
    ) -> None:  # pragma: no cover - default no-op
        del view, changes

    def update(
        self,
        view: View,
        delta: Optional[Delta],
        edit_type: str,
        author: str,
    ) -> None:  # pragma: no cover - default no-op
        del view, delta, edit_type, author

    def completions(
        self, view: View, request_id: int, offset: int
    ) -> CompletionResponse:
        del view, request_id, offset
        return CompletionResponse()


__all__ = ["Plugin"]
