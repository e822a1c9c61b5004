"""Callback dispatcher routing host notifications and requests to a plugin."""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

from wordcomplete.host.view import View, ViewLease
from wordcomplete.rope import Delta, DeltaError
from wordcomplete.runtime import telemetry
from wordcomplete.text.completion import CompletionResponse

from .base import Plugin
from .errors import BUSY, INVALID_REQUEST, RemoteError

ViewFactory = Callable[[str], View]


class DispatchState(str, Enum):
    IDLE = "idle"
    HANDLING_NOTIFICATION = "handling_notification"
    HANDLING_UPDATE = "handling_update"
    HANDLING_COMPLETION = "handling_completion"


class CallbackDispatcher:
    """Owns per-view bookkeeping and invokes plugin callbacks one at a time.

    Each callback receives a :class:`ViewLease` that is revoked as soon as the
    callback returns, so plugins cannot hold on to host views.
    """

    def __init__(
        self,
        plugin: Plugin,
        *,
        view_factory: Optional[ViewFactory] = None,
    ) -> None:
        self.plugin = plugin
        self._view_factory = view_factory
        self._views: Dict[str, View] = {}
        self._states: Dict[str, DispatchState] = {}
        self.logger = telemetry.get_logger("wordcomplete.dispatcher")

    @property
    def open_views(self) -> tuple[str, ...]:
        return tuple(self._views)

    def state_of(self, view_id: str) -> DispatchState:
        try:
            return self._states[view_id]
        except KeyError:
            raise RemoteError.unknown_view(view_id) from None

    # --- callbacks ------------------------------------------------------------
    def view_opened(self, view: View) -> None:
        view_id = view.view_id
        if view_id in self._views:
            raise RemoteError(
                INVALID_REQUEST, f"View '{view_id}' is already open", {"view_id": view_id}
            )
        self._views[view_id] = view
        self._states[view_id] = DispatchState.IDLE
        telemetry.record_event("view.opened", data={"view_id": view_id})
        with self._invoke(view_id, DispatchState.HANDLING_NOTIFICATION) as lease:
            self.plugin.new_view(lease)

    def open_view(self, view_id: str) -> None:
        """Open a view by id using the configured view factory."""

        if self._view_factory is None:
            raise RemoteError(INVALID_REQUEST, "No view factory configured for new_view")
        self.view_opened(self._view_factory(view_id))

    def view_closed(self, view_id: str) -> None:
        try:
            with self._invoke(view_id, DispatchState.HANDLING_NOTIFICATION) as lease:
                self.plugin.did_close(lease)
        finally:
            if self._states.get(view_id) is DispatchState.IDLE:
                self._views.pop(view_id, None)
                self._states.pop(view_id, None)
        telemetry.record_event("view.closed", data={"view_id": view_id})

    def view_saved(self, view_id: str, old_path: Optional[Path] = None) -> None:
        with self._invoke(view_id, DispatchState.HANDLING_NOTIFICATION) as lease:
            self.plugin.did_save(lease, old_path)

    def config_changed(self, view_id: str, changes: Mapping[str, Any]) -> None:
        with self._invoke(view_id, DispatchState.HANDLING_NOTIFICATION) as lease:
            self.plugin.config_changed(lease, dict(changes))

    def update(
        self,
        view_id: str,
        delta: Optional[Delta],
        edit_type: str,
        author: str,
    ) -> None:
        with self._invoke(view_id, DispatchState.HANDLING_UPDATE) as lease:
            self.plugin.update(lease, delta, edit_type, author)

    def completions(
        self, view_id: str, request_id: int, offset: int
    ) -> CompletionResponse:
        with self._invoke(view_id, DispatchState.HANDLING_COMPLETION) as lease:
            response = self.plugin.completions(lease, request_id, offset)
        if response is None:
            response = CompletionResponse()
        return response

    @contextmanager
    def _invoke(self, view_id: str, state: DispatchState) -> Iterator[ViewLease]:
        current = self.state_of(view_id)
        if current is not DispatchState.IDLE:
            raise RemoteError(
                BUSY,
                f"View '{view_id}' is already {current.value}",
                {"view_id": view_id, "state": current.value},
            )
        lease = ViewLease(self._views[view_id])
        self._states[view_id] = state
        try:
            with telemetry.span(
                f"dispatch::{state.value}",
                logger_name="wordcomplete.dispatcher",
                component="dispatcher",
                metadata={"view_id": view_id},
            ):
                yield lease
        except RemoteError:
            raise
        except Exception as exc:
            self.logger.exception("plugin callback failed view=%s", view_id)
            raise RemoteError.internal(exc) from exc
        finally:
            lease.revoke()
            if view_id in self._states:
                self._states[view_id] = DispatchState.IDLE

    # --- message-shaped entry point -------------------------------------------
    def handle(self, method: str, params: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Dispatch a remote ``method`` call; requests return a JSON-ready result."""

        handler = _METHOD_HANDLERS.get(method)
        if handler is None:
            raise RemoteError.method_not_found(method)
        if not isinstance(params, Mapping):
            raise RemoteError.invalid_params("params must be an object", {"method": method})
        return handler(self, params)


def _require(params: Mapping[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in params:
        raise RemoteError.invalid_params(f"Missing parameter '{key}'", {"param": key})
    value = params[key]
    if (isinstance(value, bool) and kind is int) or not isinstance(value, kind):
        raise RemoteError.invalid_params(
            f"Parameter '{key}' has the wrong type", {"param": key}
        )
    return value


def _handle_new_view(
    dispatcher: CallbackDispatcher, params: Mapping[str, Any]
) -> None:
    dispatcher.open_view(_require(params, "view_id", str))
    return None


def _handle_did_close(
    dispatcher: CallbackDispatcher, params: Mapping[str, Any]
) -> None:
    dispatcher.view_closed(_require(params, "view_id", str))
    return None


def _handle_did_save(
    dispatcher: CallbackDispatcher, params: Mapping[str, Any]
) -> None:
    view_id = _require(params, "view_id", str)
    raw_path = params.get("path")
    if raw_path is not None and not isinstance(raw_path, str):
        raise RemoteError.invalid_params("Parameter 'path' has the wrong type", {"param": "path"})
    dispatcher.view_saved(view_id, Path(raw_path) if raw_path else None)
    return None


def _handle_config_changed(
    dispatcher: CallbackDispatcher, params: Mapping[str, Any]
) -> None:
    view_id = _require(params, "view_id", str)
    dispatcher.config_changed(view_id, _require(params, "changes", Mapping))
    return None


def _handle_update(
    dispatcher: CallbackDispatcher, params: Mapping[str, Any]
) -> None:
    view_id = _require(params, "view_id", str)
    raw_delta = params.get("delta")
    delta: Optional[Delta] = None
    if raw_delta is not None:
        if not isinstance(raw_delta, Mapping):
            raise RemoteError.invalid_params("Parameter 'delta' has the wrong type", {"param": "delta"})
        try:
            delta = Delta.from_json(raw_delta)
        except DeltaError as exc:
            raise RemoteError.invalid_params(str(exc), {"param": "delta"}) from exc
    dispatcher.update(
        view_id,
        delta,
        _require(params, "edit_type", str),
        _require(params, "author", str),
    )
    return None


def _handle_completions(
    dispatcher: CallbackDispatcher, params: Mapping[str, Any]
) -> Dict[str, Any]:
    view_id = _require(params, "view_id", str)
    request_id = _require(params, "request_id", int)
    offset = _require(params, "pos", int)
    if offset < 0:
        raise RemoteError.invalid_params("Parameter 'pos' must be non-negative", {"param": "pos"})
    return dispatcher.completions(view_id, request_id, offset).to_json()


_METHOD_HANDLERS: Dict[
    str, Callable[[CallbackDispatcher, Mapping[str, Any]], Optional[Dict[str, Any]]]
] = {
    "new_view": _handle_new_view,
    "did_close": _handle_did_close,
    "did_save": _handle_did_save,
    "config_changed": _handle_config_changed,
    "update": _handle_update,
    "completions": _handle_completions,
}


__all__ = ["CallbackDispatcher", "DispatchState", "ViewFactory"]
