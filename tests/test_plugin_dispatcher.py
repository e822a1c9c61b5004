from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional

import pytest

from wordcomplete.host import LocalDocument, LocalHost, LocalView, ViewLeaseExpired
from wordcomplete.host.view import View
from wordcomplete.plugin import (
    CallbackDispatcher,
    DispatchState,
    Plugin,
    RemoteError,
    WordCompletePlugin,
)
from wordcomplete.plugin.errors import (
    BUSY,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    UNKNOWN_VIEW,
)
from wordcomplete.rope import Delta, Interval
from wordcomplete.text.completion import CompletionResponse


class RecordingPlugin(Plugin):
    """Plugin that records callbacks and keeps the views it was handed."""

    def __init__(self) -> None:
        self.calls: List[tuple[str, Any]] = []
        self.kept: List[View] = []

    def new_view(self, view: View) -> None:
        self.kept.append(view)
        self.calls.append(("new_view", view.view_id))

    def did_close(self, view: View) -> None:
        self.calls.append(("did_close", view.view_id))

    def did_save(self, view: View, old_path: Optional[Path]) -> None:
        self.calls.append(("did_save", old_path))

    def config_changed(self, view: View, changes: Mapping[str, Any]) -> None:
        self.calls.append(("config_changed", dict(changes)))


class ExplodingPlugin(Plugin):
    def update(self, view, delta, edit_type, author) -> None:
        raise KeyError("boom")


class ReentrantPlugin(Plugin):
    def __init__(self) -> None:
        self.dispatcher: CallbackDispatcher | None = None
        self.observed: DispatchState | None = None

    def update(self, view, delta, edit_type, author) -> None:
        assert self.dispatcher is not None
        self.observed = self.dispatcher.state_of(view.view_id)
        self.dispatcher.completions(view.view_id, 1, 0)


def make_host(plugin: Plugin | None = None) -> LocalHost:
    return LocalHost(CallbackDispatcher(plugin or WordCompletePlugin()))


def insert_delta(view: LocalView, offset: int, text: str) -> Delta:
    return Delta.simple_edit(
        Interval.empty_at(offset), text, view.document.byte_length
    )


def test_exclamation_capitalizes_previous_word() -> None:
    host = make_host()
    view = host.open("view-1", "hello world")

    edits = host.insert("view-1", len("hello world"), "!")

    assert view.text == "hello WORLD!"
    assert len(edits) == 1
    assert edits[0].author == "wordcomplete"


@pytest.mark.parametrize("typed", ["?", "!!", " ", "a"])
def test_other_insertions_do_not_edit(typed: str) -> None:
    host = make_host()
    view = host.open("view-1", "hello world")

    edits = host.insert("view-1", len("hello world"), typed)

    assert edits == []
    assert view.text == "hello world" + typed


def test_replacement_ending_in_exclamation_does_not_edit() -> None:
    host = make_host()
    view = host.open("view-1", "hello world")
    delta = Delta.simple_edit(Interval(6, 11), "there!", view.document.byte_length)

    assert host.edit("view-1", delta) == []
    assert view.text == "hello there!"


def test_update_without_delta_is_noop() -> None:
    dispatcher = CallbackDispatcher(WordCompletePlugin())
    view = LocalView("view-1", LocalDocument.from_text("hi"))
    dispatcher.view_opened(view)

    dispatcher.update("view-1", None, "insert", "user")

    assert view.submitted == []


def test_capitalize_failure_is_swallowed() -> None:
    dispatcher = CallbackDispatcher(WordCompletePlugin())
    view = LocalView("view-1", LocalDocument.from_text("hi"))
    dispatcher.view_opened(view)
    stale = Delta.simple_edit(Interval.empty_at(40), "!", 50)

    dispatcher.update("view-1", stale, "insert", "user")

    assert view.submitted == []
    assert dispatcher.state_of("view-1") is DispatchState.IDLE


def test_completions_response_flags() -> None:
    host = make_host()
    host.open("view-1", "foo foobar foo bar fo")

    response = host.complete("view-1", len("foo foobar foo bar fo"))

    assert isinstance(response, CompletionResponse)
    assert response.is_incomplete is False
    assert response.can_resolve is False
    assert [item.label for item in response.items] == ["foo", "foobar"]


def test_completions_with_empty_query_returns_empty_items() -> None:
    host = make_host()
    host.open("view-1", "foo foobar ")

    response = host.complete("view-1", len("foo foobar "))

    assert response.items == []


def test_accepting_completion_replaces_prefix() -> None:
    host = make_host()
    view = host.open("view-1", "foobar fo")
    response = host.complete("view-1", len("foobar fo"))

    host.accept("view-1", response.items[0])

    assert view.text == "foobar foobar"


def test_lifecycle_callbacks_reach_plugin(tmp_path: Path) -> None:
    plugin = RecordingPlugin()
    host = make_host(plugin)
    host.open("view-1", "text", path=tmp_path / "old.txt")

    host.change_config("view-1", {"tab_size": 4})
    host.save("view-1", tmp_path / "new.txt")
    host.close("view-1")

    assert plugin.calls == [
        ("new_view", "view-1"),
        ("config_changed", {"tab_size": 4}),
        ("did_save", tmp_path / "old.txt"),
        ("did_close", "view-1"),
    ]
    assert (tmp_path / "new.txt").read_text(encoding="utf-8") == "text"


def test_view_lease_expires_after_callback() -> None:
    plugin = RecordingPlugin()
    host = make_host(plugin)
    host.open("view-1", "text")

    (kept,) = plugin.kept
    with pytest.raises(ViewLeaseExpired):
        kept.get_document()


def test_calls_after_close_are_rejected() -> None:
    host = make_host()
    host.open("view-1", "text")
    dispatcher = host.dispatcher
    host.close("view-1")

    with pytest.raises(RemoteError) as excinfo:
        dispatcher.completions("view-1", 1, 0)

    assert excinfo.value.code == UNKNOWN_VIEW
    assert dispatcher.open_views == ()


def test_reentrant_callback_is_rejected() -> None:
    plugin = ReentrantPlugin()
    dispatcher = CallbackDispatcher(plugin)
    plugin.dispatcher = dispatcher
    view = LocalView("view-1", LocalDocument.from_text("abc"))
    dispatcher.view_opened(view)

    with pytest.raises(RemoteError) as excinfo:
        dispatcher.update("view-1", None, "insert", "user")

    assert excinfo.value.code == BUSY
    assert plugin.observed is DispatchState.HANDLING_UPDATE
    assert dispatcher.state_of("view-1") is DispatchState.IDLE


def test_unexpected_plugin_errors_become_internal_remote_errors() -> None:
    dispatcher = CallbackDispatcher(ExplodingPlugin())
    dispatcher.view_opened(LocalView("view-1"))

    with pytest.raises(RemoteError) as excinfo:
        dispatcher.update("view-1", None, "insert", "user")

    assert excinfo.value.code == INTERNAL_ERROR
    assert excinfo.value.to_json()["data"] == {"type": "KeyError"}


def test_default_plugin_returns_empty_completions() -> None:
    dispatcher = CallbackDispatcher(Plugin())
    dispatcher.view_opened(LocalView("view-1"))

    response = dispatcher.completions("view-1", 7, 0)

    assert response.items == []


def make_message_dispatcher() -> tuple[CallbackDispatcher, dict[str, LocalView]]:
    views: dict[str, LocalView] = {}

    def factory(view_id: str) -> LocalView:
        views[view_id] = LocalView(view_id, LocalDocument.from_text("hello world"))
        return views[view_id]

    return CallbackDispatcher(WordCompletePlugin(), view_factory=factory), views


def test_handle_routes_update_messages() -> None:
    dispatcher, views = make_message_dispatcher()
    dispatcher.handle("new_view", {"view_id": "view-1"})
    view = views["view-1"]
    delta = insert_delta(view, len("hello world"), "!")
    view.apply(delta)

    result = dispatcher.handle(
        "update",
        {
            "view_id": "view-1",
            "delta": delta.to_json(),
            "edit_type": "insert",
            "author": "user",
        },
    )

    assert result is None
    assert view.text == "hello WORLD!"


def test_handle_returns_completion_json() -> None:
    dispatcher, _ = make_message_dispatcher()
    dispatcher.handle("new_view", {"view_id": "view-1"})

    result = dispatcher.handle(
        "completions", {"view_id": "view-1", "request_id": 3, "pos": 2}
    )

    assert result == {
        "is_incomplete": False,
        "can_resolve": False,
        "items": [
            {
                "label": "hello",
                "edit": {
                    "base_len": 11,
                    "els": [{"insert": "hello"}, {"copy": [2, 11]}],
                },
            }
        ],
    }


def test_handle_rejects_unknown_method() -> None:
    dispatcher, _ = make_message_dispatcher()

    with pytest.raises(RemoteError) as excinfo:
        dispatcher.handle("hover", {})

    assert excinfo.value.code == METHOD_NOT_FOUND


@pytest.mark.parametrize(
    "method, params",
    [
        ("completions", {"view_id": "view-1", "request_id": 1}),
        ("completions", {"view_id": "view-1", "request_id": 1, "pos": "3"}),
        ("completions", {"view_id": "view-1", "request_id": True, "pos": 3}),
        ("update", {"view_id": "view-1", "delta": {"els": []}, "edit_type": "x", "author": "y"}),
        ("config_changed", {"view_id": "view-1", "changes": ["tab_size"]}),
        ("did_save", {"view_id": "view-1", "path": 12}),
    ],
)
def test_handle_rejects_malformed_params(method: str, params: dict) -> None:
    dispatcher, _ = make_message_dispatcher()
    dispatcher.handle("new_view", {"view_id": "view-1"})

    with pytest.raises(RemoteError) as excinfo:
        dispatcher.handle(method, params)

    assert excinfo.value.code == INVALID_PARAMS


def test_reopening_view_is_rejected() -> None:
    dispatcher, _ = make_message_dispatcher()
    dispatcher.handle("new_view", {"view_id": "view-1"})

    with pytest.raises(RemoteError):
        dispatcher.handle("new_view", {"view_id": "view-1"})
