"""Host query surface the plugin consumes, and the borrowed view lease."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from wordcomplete.rope import Delta


class HostError(RuntimeError):
    """Raised when a host query fails (bad line/offset, transport fault)."""

    def __init__(
        self,
        message: str,
        *,
        view_id: str | None = None,
        method: str | None = None,
    ) -> None:
        super().__init__(message)
        self.view_id = view_id
        self.method = method


class ViewLeaseExpired(RuntimeError):
    """Raised when a view handle is used after its callback returned."""


@dataclass(frozen=True, slots=True)
class EditRequest:
    """An edit submitted to the host along with its application flags."""

    delta: Delta
    priority: int
    after_cursor: bool
    validate: bool
    author: str
    kind: str = "plugin"


class View(Protocol):
    """Per-document session handle owned by the host."""

    @property
    def view_id(self) -> str: ...

    def line_of_offset(self, offset: int) -> int: ...

    def offset_of_line(self, line: int) -> int: ...

    def get_line(self, line: int) -> str: ...

    def get_document(self) -> str: ...

    def get_buffer_size(self) -> int: ...

    def submit_edit(
        self,
        edit: Delta,
        priority: int,
        after_cursor: bool,
        validate: bool,
        author: str,
        *,
        kind: str = "plugin",
    ) -> None: ...


class ViewLease:
    """Borrowed view valid only for the duration of one callback.

    The dispatcher hands plugins a lease instead of the host view; once the
    callback returns the lease is revoked and every query raises
    :class:`ViewLeaseExpired`.
    """

    __slots__ = ("_view", "_view_id")

    def __init__(self, view: View) -> None:
        self._view: Optional[View] = view
        self._view_id = view.view_id

    @property
    def view_id(self) -> str:
        return self._view_id

    @property
    def active(self) -> bool:
        return self._view is not None

    def revoke(self) -> None:
        self._view = None

    def _target(self) -> View:
        if self._view is None:
            raise ViewLeaseExpired(
                f"View '{self._view_id}' was used after its callback returned"
            )
        return self._view

    def line_of_offset(self, offset: int) -> int:
        return self._target().line_of_offset(offset)

    def offset_of_line(self, line: int) -> int:
        return self._target().offset_of_line(line)

    def get_line(self, line: int) -> str:
        return self._target().get_line(line)

    def get_document(self) -> str:
        return self._target().get_document()

    def get_buffer_size(self) -> int:
        return self._target().get_buffer_size()

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
        self._target().submit_edit(
            edit, priority, after_cursor, validate, author, kind=kind
        )

    def __repr__(self) -> str:
        state = "active" if self.active else "revoked"
        return f"ViewLease(view_id={self._view_id!r}, {state})"


__all__ = ["EditRequest", "HostError", "View", "ViewLease", "ViewLeaseExpired"]
