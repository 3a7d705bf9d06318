"""Grid editor for the "Text" fields of a JSON file."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.coordinate import Coordinate
from textual.widgets import DataTable, Footer, Header, Input, Static

from ._locate import parse_path
from .document import DocumentError, Session
from .extract import TEXT_KEY

log = logging.getLogger(__name__)

# Share of the table width given to the path / original / translated columns
COLUMN_SHARES = (0.2, 0.4, 0.4)
COLUMN_LABELS = ("Location in JSON", "Original text", "Translated text")
TRANSLATED_COLUMN = 2


def column_widths(total: int) -> tuple[int, int, int]:
    """Split *total* cells between the three columns."""
    # each column also takes 2 cells of padding
    usable = max(0, total - 2 * len(COLUMN_SHARES))
    path_w, original_w, translated_w = (
        max(1, int(usable * share)) for share in COLUMN_SHARES
    )
    return path_w, original_w, translated_w


def path_from_paste(text: str) -> str:
    """Turn pasted text (e.g. a file dropped on the terminal) into a path.

    Returns an empty string if the text does not look like a single path.
    """
    text = text.strip()
    if not text or "\n" in text:
        return ""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        text = text[1:-1]
    if text.startswith("file://"):
        text = unquote(urlparse(text).path)
    return text


class TextEditorApp(App):
    """TUI app listing every "Text" string of a JSON file in a table."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #grid {
        height: 1fr;
        border: solid $accent;
    }
    #edit-input {
        height: auto;
    }
    #path-panel {
        display: none;
        height: auto;
        padding: 0 1;
        background: $surface;
        border-top: solid $accent 50%;
    }
    #path-panel.visible {
        display: block;
    }
    #status {
        height: 1;
        padding: 0 1;
        color: $text-muted;
        background: $surface;
    }
    """

    TITLE = "JSON Text Editor"
    ENABLE_COMMAND_PALETTE = False
    BINDINGS = [
        Binding("ctrl+o", "open", "Open", priority=True),
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("f2", "save_as", "Save as", priority=True),
        Binding("ctrl+g", "goto", "Go to path", priority=True),
        Binding("ctrl+q", "quit", "Quit", priority=True),
        Binding("escape", "cancel_prompt", "Cancel", show=False),
    ]

    def __init__(self, file_path: str = "", key: str = TEXT_KEY, **kwargs) -> None:
        super().__init__(**kwargs)
        self.initial_path = file_path
        self.session = Session(key=key)
        # "open", "save_as" or "goto" while the path prompt is shown
        self._prompt_action: str = ""

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        table = DataTable(id="grid", cursor_type="row", zebra_stripes=True)
        yield table
        yield Input(placeholder="Translated text (Enter to apply)", id="edit-input")
        with Vertical(id="path-panel"):
            yield Static("", id="path-title")
            yield Input(placeholder="File path", id="path-input")
        yield Static(
            "Open a JSON file with Ctrl+O or drop one here", id="status", markup=False
        )
        yield Footer()

    def on_mount(self) -> None:
        self._update_title()
        self.query_one("#grid").focus()
        if self.initial_path:
            self.open_file(self.initial_path)

    # -- Helpers -----------------------------------------------------------

    def _update_title(self) -> None:
        if self.session.file_path is not None:
            self.sub_title = str(self.session.file_path)
        else:
            self.sub_title = "(no file)"

    def _set_status(self, text: str) -> None:
        self.query_one("#status", Static).update(text)

    def _populate_table(self, cursor_row: int = 0) -> None:
        table = self.query_one("#grid", DataTable)
        table.clear(columns=True)
        widths = column_widths(table.size.width or self.size.width)
        for label, width in zip(COLUMN_LABELS, widths):
            table.add_column(label, width=width)
        for i, entry in enumerate(self.session.entries):
            table.add_row(
                entry.path, entry.original_text, entry.translated_text, key=str(i)
            )
        if self.session.entries:
            table.move_cursor(row=min(cursor_row, len(self.session.entries) - 1))
        if self.focused is not self.query_one("#edit-input"):
            self._sync_edit_input()

    def _sync_edit_input(self) -> None:
        table = self.query_one("#grid", DataTable)
        edit = self.query_one("#edit-input", Input)
        entries = self.session.entries
        row = table.cursor_row
        if entries and 0 <= row < len(entries):
            edit.value = entries[row].translated_text
        else:
            edit.value = ""

    def _show_prompt(self, action: str, title: str, value: str = "") -> None:
        self._prompt_action = action
        self.query_one("#path-title", Static).update(f"[b]{title}[/b]")
        path_input = self.query_one("#path-input", Input)
        path_input.value = value
        self.query_one("#path-panel").add_class("visible")
        path_input.focus()

    def _hide_prompt(self) -> None:
        self._prompt_action = ""
        self.query_one("#path-panel").remove_class("visible")
        self.query_one("#grid").focus()

    # -- Core operations ---------------------------------------------------

    def open_file(self, file_path: str) -> bool:
        self._set_status("Loading file...")
        try:
            entries = self.session.load(file_path)
        except DocumentError as exc:
            log.warning("Load of %s failed: %s", file_path, exc)
            self._set_status("Error loading file")
            self.notify(str(exc), severity="error", timeout=6)
            return False
        self._populate_table()
        self._update_title()
        name = Path(file_path).name
        self._set_status(f"Loaded: {name} - {len(entries)} texts found")
        return True

    def commit_row(self, row: int, text: str) -> bool:
        try:
            entry = self.session.commit_edit(row, text)
        except DocumentError as exc:
            self.notify(f"Error updating value: {exc}", severity="error", timeout=6)
            return False
        table = self.query_one("#grid", DataTable)
        table.update_cell_at(Coordinate(row, TRANSLATED_COLUMN), entry.translated_text)
        modified = self.session.document.modified_count
        self._set_status(f"Updated {entry.path} ({modified} modified)")
        return True

    def save_file(self, file_path: str | None = None) -> bool:
        try:
            path = self.session.save(file_path)
        except DocumentError as exc:
            log.warning("Save failed: %s", exc)
            self.notify(str(exc), severity="error", timeout=6)
            return False
        self._update_title()
        label = "Saved as" if file_path is not None else "Saved"
        self._set_status(f"{label}: {path.name}")
        self.notify(f"{label}: {path}", severity="information")
        return True

    def goto_path(self, text: str) -> bool:
        """Move the grid cursor to the row whose location is *text*."""
        try:
            steps = parse_path(text)
        except ValueError as exc:
            self.notify(f"Invalid path: {exc}", severity="error", timeout=6)
            return False
        for row, entry in enumerate(self.session.entries):
            if entry.steps == steps:
                self.query_one("#grid", DataTable).move_cursor(row=row)
                return True
        self.notify(f"No text at {text}", severity="warning")
        return False

    # -- Actions -----------------------------------------------------------

    def action_open(self) -> None:
        self._show_prompt("open", "Open JSON file")

    def action_save(self) -> None:
        if not self.session.loaded:
            self.notify("No file loaded to save", severity="warning")
            return
        self.save_file()

    def action_save_as(self) -> None:
        if not self.session.loaded:
            self.notify("No data to save", severity="warning")
            return
        current = str(self.session.file_path) if self.session.file_path else ""
        self._show_prompt("save_as", "Save as", current)

    def action_goto(self) -> None:
        if not self.session.loaded:
            self.notify("No file loaded", severity="warning")
            return
        self._show_prompt("goto", "Go to path")

    def action_cancel_prompt(self) -> None:
        if self._prompt_action:
            self._hide_prompt()

    # -- Event handlers ----------------------------------------------------

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self._sync_edit_input()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.query_one("#edit-input").focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "edit-input":
            if not self.session.loaded:
                self.notify("No file loaded", severity="warning")
                return
            row = self.query_one("#grid", DataTable).cursor_row
            if self.commit_row(row, event.value):
                self.query_one("#grid").focus()
            return

        if event.input.id == "path-input":
            target = event.value.strip()
            if not target:
                return
            action = self._prompt_action
            if action == "open":
                if self.open_file(target):
                    self._hide_prompt()
            elif action == "save_as":
                if self.save_file(target):
                    self._hide_prompt()
            elif action == "goto":
                if self.goto_path(target):
                    self._hide_prompt()

    def on_paste(self, event: events.Paste) -> None:
        if isinstance(self.focused, Input):
            return
        target = path_from_paste(event.text)
        if target:
            self.open_file(target)

    def on_resize(self, event: events.Resize) -> None:
        if self.session.loaded:
            row = self.query_one("#grid", DataTable).cursor_row
            self._populate_table(row)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="jtext",
        description="Edit the \"Text\" strings of a JSON file",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="JSON file to open",
    )
    parser.add_argument(
        "-k", "--key",
        default=TEXT_KEY,
        help="property name to edit (default: %(default)s)",
    )
    parser.add_argument(
        "--log-file",
        default="",
        help="write a debug log to this file",
    )
    args = parser.parse_args()

    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    app = TextEditorApp(file_path=args.file, key=args.key)
    app.run()


if __name__ == "__main__":
    main()
