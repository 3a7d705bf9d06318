"""Discovery of editable "Text" fields in a parsed JSON tree."""

from __future__ import annotations

from dataclasses import dataclass, field

from ._locate import Step, format_path

TEXT_KEY = "Text"


@dataclass
class TextEntry:
    """One editable string found in the document."""

    steps: tuple[Step, ...]
    original_text: str
    translated_text: str = ""
    path: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not self.path:
            self.path = format_path(self.steps)

    @property
    def modified(self) -> bool:
        return self.translated_text != self.original_text


def find_text_fields(data: object, *, key: str = TEXT_KEY) -> list[TextEntry]:
    """Return an entry for every string property named exactly *key*.

    Objects are walked in insertion order and arrays in index order, depth
    first. A matching property is a leaf; any other property is descended
    into whatever its type.
    """
    entries: list[TextEntry] = []
    _collect(data, key, [], entries)
    return entries


def _collect(
    node: object,
    key: str,
    current_path: list[Step],
    entries: list[TextEntry],
) -> None:
    if isinstance(node, dict):
        for k, v in node.items():
            if k == key and isinstance(v, str):
                steps = tuple(current_path + [k])
                entries.append(TextEntry(steps, v, v))
            else:
                _collect(v, key, current_path + [k], entries)
    elif isinstance(node, list):
        for i, v in enumerate(node):
            _collect(v, key, current_path + [i], entries)
