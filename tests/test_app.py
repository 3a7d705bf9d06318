"""Tests for the grid editor."""

import asyncio

from textual.coordinate import Coordinate
from textual.widgets import DataTable

from jtext.app import COLUMN_LABELS, TextEditorApp, column_widths, path_from_paste

EXAMPLE = '{"a":{"Text":"Hello"},"b":[{"Text":"World"},{"Other":"X"}]}'


def _write(tmp_path, content, name="doc.json"):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def _run(app, check):
    """Mount *app* headless, record its notifications and run *check*."""
    notes: list[tuple[str, str]] = []

    def notify(message, *, severity="information", **kwargs):
        notes.append((str(message), severity))

    app.notify = notify

    async def run():
        async with app.run_test() as pilot:
            await pilot.pause()
            await check(app, pilot, notes)

    asyncio.run(run())


def _cell(app, row, column):
    return app.query_one("#grid", DataTable).get_cell_at(Coordinate(row, column))


class TestColumnWidths:
    """20/40/40 split of the table width."""

    def test_split(self):
        assert column_widths(106) == (20, 40, 40)

    def test_three_columns(self):
        assert len(column_widths(80)) == len(COLUMN_LABELS)

    def test_proportions(self):
        path_w, original_w, translated_w = column_widths(206)
        assert original_w == translated_w
        assert original_w == 2 * path_w

    def test_never_zero(self):
        assert column_widths(0) == (1, 1, 1)


class TestPathFromPaste:
    """Dropped file paths arrive as pasted text."""

    def test_plain(self):
        assert path_from_paste("/tmp/a.json") == "/tmp/a.json"

    def test_strips_whitespace(self):
        assert path_from_paste("  /tmp/a.json \n") == "/tmp/a.json"

    def test_strips_quotes(self):
        assert path_from_paste("'/tmp/my file.json'") == "/tmp/my file.json"
        assert path_from_paste('"C:\\data\\a.json"') == "C:\\data\\a.json"

    def test_file_url(self):
        assert path_from_paste("file:///tmp/my%20file.json") == "/tmp/my file.json"

    def test_multiline_rejected(self):
        assert path_from_paste("/tmp/a.json\n/tmp/b.json") == ""

    def test_empty(self):
        assert path_from_paste("   ") == ""


class TestTextEditorApp:
    """App construction and key bindings."""

    def test_session_key(self):
        app = TextEditorApp(key="Label")
        assert app.session.key == "Label"
        assert not app.session.loaded

    def test_initial_path(self):
        app = TextEditorApp(file_path="doc.json")
        assert app.initial_path == "doc.json"

    def test_quit_bound(self):
        actions = {b.key: b.action for b in TextEditorApp.BINDINGS}
        assert actions["ctrl+q"] == "quit"
        assert actions["ctrl+g"] == "goto"


class TestOpenFile:
    """Loading through the shell."""

    def test_initial_file_fills_grid(self, tmp_path):
        path = _write(tmp_path, EXAMPLE)

        async def check(app, pilot, notes):
            table = app.query_one("#grid", DataTable)
            assert table.row_count == 2
            assert _cell(app, 1, 0) == "b[0].Text"
            assert _cell(app, 1, 1) == "World"
            assert app.sub_title == str(path)
            assert notes == []

        _run(TextEditorApp(file_path=str(path)), check)

    def test_missing_file_keeps_grid(self, tmp_path):
        path = _write(tmp_path, EXAMPLE)

        async def check(app, pilot, notes):
            assert not app.open_file(str(tmp_path / "missing.json"))
            await pilot.pause()
            assert app.query_one("#grid", DataTable).row_count == 2
            assert app.sub_title == str(path)
            assert app.session.file_path == path
            assert notes[-1][1] == "error"

        _run(TextEditorApp(file_path=str(path)), check)

    def test_invalid_file_keeps_grid(self, tmp_path):
        path = _write(tmp_path, EXAMPLE)
        bad = _write(tmp_path, '{"a": ', "bad.json")

        async def check(app, pilot, notes):
            assert not app.open_file(str(bad))
            await pilot.pause()
            assert app.query_one("#grid", DataTable).row_count == 2
            assert app.sub_title == str(path)
            assert notes[-1][1] == "error"

        _run(TextEditorApp(file_path=str(path)), check)

    def test_deeply_nested_file_reported(self, tmp_path):
        deep = _write(tmp_path, "[" * 100000 + "]" * 100000, "deep.json")

        async def check(app, pilot, notes):
            assert not app.open_file(str(deep))
            assert not app.session.loaded
            assert "nested too deeply" in notes[-1][0]
            assert notes[-1][1] == "error"

        _run(TextEditorApp(), check)


class TestCommitRow:
    """Applying edits through the shell."""

    def test_commit_updates_cell(self, tmp_path):
        path = _write(tmp_path, EXAMPLE)

        async def check(app, pilot, notes):
            assert app.commit_row(0, "Hola")
            await pilot.pause()
            assert _cell(app, 0, 2) == "Hola"
            assert app.session.document.data["a"]["Text"] == "Hola"

        _run(TextEditorApp(file_path=str(path)), check)

    def test_unresolvable_row_reported(self, tmp_path):
        path = _write(tmp_path, EXAMPLE)

        async def check(app, pilot, notes):
            del app.session.document.data["a"]
            assert not app.commit_row(0, "Hola")
            await pilot.pause()
            assert _cell(app, 0, 2) == "Hello"
            assert app.session.entries[0].translated_text == "Hello"
            assert notes[-1][1] == "error"
            # the next row still accepts edits
            assert app.commit_row(1, "Mundo")

        _run(TextEditorApp(file_path=str(path)), check)


class TestSaveFile:
    """Saving through the shell."""

    def test_save_as(self, tmp_path):
        path = _write(tmp_path, EXAMPLE)
        target = tmp_path / "out.json"

        async def check(app, pilot, notes):
            app.commit_row(0, "Hola")
            assert app.save_file(str(target))
            assert app.sub_title == str(target)
            assert '"Hola"' in target.read_text(encoding="utf-8")

        _run(TextEditorApp(file_path=str(path)), check)

    def test_unwritable_path_reported(self, tmp_path):
        path = _write(tmp_path, EXAMPLE)
        blocker = _write(tmp_path, "x", "file")

        async def check(app, pilot, notes):
            app.commit_row(0, "Hola")
            assert not app.save_file(str(blocker / "out.json"))
            assert app.session.file_path == path
            assert app.sub_title == str(path)
            assert app.session.entries[0].translated_text == "Hola"
            assert notes[-1][1] == "error"

        _run(TextEditorApp(file_path=str(path)), check)

    def test_unencodable_text_keeps_file(self, tmp_path):
        path = _write(tmp_path, '{"Text": "a\\ud800b", "Other": 1}')
        before = path.read_bytes()

        async def check(app, pilot, notes):
            assert not app.save_file()
            assert path.read_bytes() == before
            assert notes[-1][1] == "error"

        _run(TextEditorApp(file_path=str(path)), check)


class TestGotoPath:
    """Jumping to a row by its location."""

    def test_goto_existing(self, tmp_path):
        path = _write(tmp_path, EXAMPLE)

        async def check(app, pilot, notes):
            assert app.goto_path("b[0].Text")
            await pilot.pause()
            assert app.query_one("#grid", DataTable).cursor_row == 1

        _run(TextEditorApp(file_path=str(path)), check)

    def test_goto_unknown(self, tmp_path):
        path = _write(tmp_path, EXAMPLE)

        async def check(app, pilot, notes):
            assert not app.goto_path("b[1].Text")
            assert notes[-1][1] == "warning"

        _run(TextEditorApp(file_path=str(path)), check)

    def test_goto_malformed(self, tmp_path):
        path = _write(tmp_path, EXAMPLE)

        async def check(app, pilot, notes):
            assert not app.goto_path("b[x")
            assert notes[-1][1] == "error"
            assert app.query_one("#grid", DataTable).cursor_row == 0

        _run(TextEditorApp(file_path=str(path)), check)
