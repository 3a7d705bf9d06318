"""Document model: load, edit and save the "Text" fields of a JSON file."""

from __future__ import annotations

import json
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from ._locate import replace_at_path, resolve_path
from .errors import (
    DocumentError,
    EmptyFileError,
    LoadError,
    NoDocumentError,
    NotFoundError,
    ParseError,
    ResolutionError,
    SaveError,
)
from .extract import TEXT_KEY, TextEntry, find_text_fields

__all__ = [
    "DocumentError",
    "EmptyFileError",
    "JsonDocument",
    "LoadError",
    "NoDocumentError",
    "NotFoundError",
    "ParseError",
    "ResolutionError",
    "SaveError",
    "Session",
    "TextEntry",
    "load_document",
    "save_document",
    "serialize_json",
]

log = logging.getLogger(__name__)

INDENT = 2
ENCODING = "utf-8"


@dataclass
class JsonDocument:
    """A parsed JSON tree together with the entries extracted from it."""

    data: object
    entries: list[TextEntry] = field(default_factory=list)

    @classmethod
    def from_text(cls, content: str, *, key: str = TEXT_KEY) -> JsonDocument:
        data = parse_json(content)
        try:
            entries = find_text_fields(data, key=key)
        except RecursionError as exc:
            raise ParseError("Document is nested too deeply") from exc
        return cls(data, entries)

    @property
    def modified_count(self) -> int:
        return sum(1 for entry in self.entries if entry.modified)


def _reject_constant(name: str) -> object:
    raise ValueError(f"Invalid JSON literal: {name}")


def parse_json(content: str) -> object:
    """Parse strict JSON, raising ParseError with the parser's diagnostic."""
    try:
        return json.loads(content, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise ParseError(
            f"{exc.msg} (line {exc.lineno}, column {exc.colno})",
            exc.lineno,
            exc.colno,
        ) from exc
    except ValueError as exc:
        raise ParseError(str(exc)) from exc
    except RecursionError as exc:
        raise ParseError("Document is nested too deeply") from exc


def load_document(file_path: str | Path, *, key: str = TEXT_KEY) -> JsonDocument:
    """Read and parse *file_path*."""
    path = Path(file_path)
    if not path.is_file():
        raise NotFoundError(f"File not found: {path}")
    try:
        if path.stat().st_size == 0:
            raise EmptyFileError(f"File is empty: {path}")
        # utf-8-sig also accepts files written with a BOM
        content = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(f"File is not valid UTF-8: {exc.reason}") from exc
    except OSError as exc:
        raise LoadError(f"Cannot open: {exc}") from exc
    return JsonDocument.from_text(content, key=key)


def serialize_json(data: object) -> str:
    """Pretty-print *data* with stable indentation, keeping key order.

    Numbers are written the way Python renders them, so a float literal such
    as ``1e5`` or ``1.10`` comes back as ``100000.0`` or ``1.1``. Values are
    unchanged; only their spelling is normalized.
    """
    try:
        return json.dumps(data, indent=INDENT, ensure_ascii=False)
    except RecursionError as exc:
        raise SaveError("Document is nested too deeply to serialize") from exc


def save_document(file_path: str | Path, content: str) -> Path:
    """Write *content* to *file_path*, creating parent directories.

    The content goes to a sibling temporary file first and replaces the
    target only once fully written, so a failed save leaves the old file.
    """
    path = Path(file_path)
    try:
        data = content.encode(ENCODING)
    except UnicodeEncodeError as exc:
        raise SaveError(f"Save failed: text cannot be encoded: {exc.reason}") from exc
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(data)
        if path.exists():
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except OSError as exc:
        if tmp.exists():
            tmp.unlink()
        raise SaveError(f"Save failed: {exc}") from exc
    return path


class Session:
    """The single open document and the file it came from.

    A load replaces both only after the new file parsed successfully.
    """

    def __init__(self, *, key: str = TEXT_KEY) -> None:
        self.key = key
        self.document: JsonDocument | None = None
        self.file_path: Path | None = None

    @property
    def loaded(self) -> bool:
        return self.document is not None

    @property
    def entries(self) -> list[TextEntry]:
        return self.document.entries if self.document is not None else []

    def _require_document(self) -> JsonDocument:
        if self.document is None:
            raise NoDocumentError("No file loaded")
        return self.document

    def load(self, file_path: str | Path) -> list[TextEntry]:
        document = load_document(file_path, key=self.key)
        self.document = document
        self.file_path = Path(file_path)
        log.info(
            "Loaded %s: %d texts found", self.file_path, len(document.entries)
        )
        return document.entries

    def commit_edit(self, index: int, new_text: str) -> TextEntry:
        """Write *new_text* into the tree at entry *index*."""
        document = self._require_document()
        if not 0 <= index < len(document.entries):
            raise ResolutionError(f"No entry at row {index}")
        entry = document.entries[index]
        try:
            replace_at_path(document.data, entry.steps, new_text)
        except ResolutionError:
            log.warning("Could not resolve %s", entry.path)
            raise
        entry.translated_text = new_text
        log.debug("Updated %s", entry.path)
        return entry

    def current_value(self, index: int) -> object:
        """Return the value the tree currently holds for entry *index*."""
        document = self._require_document()
        if not 0 <= index < len(document.entries):
            raise ResolutionError(f"No entry at row {index}")
        return resolve_path(document.data, document.entries[index].steps)

    def serialize(self) -> str:
        return serialize_json(self._require_document().data)

    def save(
        self, file_path: str | Path | None = None, content: str | None = None
    ) -> Path:
        """Write the document to *file_path*, or over the current file.

        Saving to a new path makes it the current file.
        """
        self._require_document()
        target = file_path if file_path is not None else self.file_path
        if target is None:
            raise NoDocumentError("No file name to save to")
        if content is None:
            content = self.serialize()
        path = save_document(target, content)
        self.file_path = path
        log.info("Saved %s", path)
        return path
