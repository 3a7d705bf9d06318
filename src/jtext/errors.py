"""Exceptions raised by the document model."""

from __future__ import annotations


class DocumentError(Exception):
    """Base class for every failure the editor reports to the user."""


class LoadError(DocumentError):
    """The file could not be turned into a document."""


class NotFoundError(LoadError):
    """The file to open does not exist."""


class EmptyFileError(LoadError):
    """The file to open has zero length."""


class ParseError(LoadError):
    """The file content is not valid JSON."""

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class ResolutionError(DocumentError):
    """A captured locator no longer points at a node in the tree."""


class SaveError(DocumentError):
    """Writing the document to disk failed."""


class NoDocumentError(DocumentError):
    """An operation needs a loaded document and there is none."""
