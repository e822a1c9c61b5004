"""Executable Textual app that hosts the word-complete plugin."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal
    from textual.widgets import Footer, Header, Log, OptionList, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use wordcomplete.adapters.textual.app"
    ) from exc

from wordcomplete.host import LocalHost
from wordcomplete.plugin import CallbackDispatcher, WordCompletePlugin
from wordcomplete.runtime import logfile
from wordcomplete.text.completion import CompletionItem

from .controller import TextualPluginAdapter, TextualUIHooks

DEMO_VIEW_ID = "view-id-1"


def create_default_host() -> LocalHost:
    """Build a LocalHost wired to the word-complete plugin."""

    return LocalHost(CallbackDispatcher(WordCompletePlugin()))


@dataclass
class UIState:
    status_text: str = ""
    completion_count: int = 0


class WordCompleteApp(App[None]):
    """Minimal Textual editor driving the plugin through a local host."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor-area {
		height: 1fr;
	}

	#editor {
		width: 3fr;
	}

	#completions {
		width: 1fr;
		border: round $accent;
	}

	#event-log {
		height: 8;
		border: round $surface-lighten-1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+space", "complete", "Complete"),
        ("ctrl+s", "save", "Save"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, path: Optional[Path] = None) -> None:
        super().__init__()
        self._state = UIState()
        self._path = path
        self.host = create_default_host()
        self.adapter: TextualPluginAdapter | None = None
        self._editor: TextArea | None = None
        self._completion_list: OptionList | None = None
        self._status_widget: Static | None = None
        self._log_widget: Log | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="editor-area"):
            self._editor = TextArea("", id="editor")
            yield self._editor
            self._completion_list = OptionList(id="completions")
            yield self._completion_list
        self._log_widget = Log(id="event-log")
        yield self._log_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        text = ""
        if self._path is not None and self._path.exists():
            text = self._path.read_text(encoding="utf-8")
        self.host.open(DEMO_VIEW_ID, text, path=self._path)
        hooks = TextualUIHooks(
            update_text=self._update_text,
            show_completions=self._show_completions,
            update_status=self._update_status,
            log=self._log_line,
        )
        self.adapter = TextualPluginAdapter(self.host, DEMO_VIEW_ID, hooks)
        if self._editor is not None:
            self._editor.load_text(text)
            self._editor.focus()
        self._update_status(f"editing {self._path or 'untitled'}")

    def on_unmount(self) -> None:
        if DEMO_VIEW_ID in self.host.views:
            self.host.close(DEMO_VIEW_ID)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter is None:
            return
        self.adapter.handle_text_change(event.text_area.text)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if self.adapter is None or self._editor is None:
            return
        location = self.adapter.accept_completion(event.option_index)
        if location is not None:
            self._editor.cursor_location = location
        self._editor.focus()

    def action_complete(self) -> None:
        if self.adapter is None or self._editor is None:
            return
        self.adapter.request_completions(self._editor.cursor_location)
        if self._completion_list is not None and self._state.completion_count:
            self._completion_list.focus()

    def action_save(self) -> None:
        if self._path is None:
            self._update_status("no file to save to")
            return
        self.host.save(DEMO_VIEW_ID, self._path)
        self._update_status(f"saved {self._path}")

    def _update_text(self, text: str) -> None:
        if self._editor is None or self._editor.text == text:
            return
        location = self._editor.cursor_location
        self._editor.load_text(text)
        self._editor.cursor_location = location

    def _show_completions(self, items: Sequence[CompletionItem]) -> None:
        self._state.completion_count = len(items)
        if self._completion_list is None:
            return
        self._completion_list.clear_options()
        self._completion_list.add_options([item.label for item in items])

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _log_line(self, line: str) -> None:
        if self._log_widget:
            self._log_widget.write_line(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the word-complete plugin inside a Textual editor."
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=os.environ.get("WORDCOMPLETE_DEMO_FILE"),
        help="File to open (default: $WORDCOMPLETE_DEMO_FILE, or an untitled buffer)",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to stderr only instead of the platform log directory",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.no_log_file:
        logfile.setup_logging(None)
    else:
        logfile.init_logging()
    app = WordCompleteApp(path=Path(args.path) if args.path else None)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
