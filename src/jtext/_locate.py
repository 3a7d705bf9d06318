"""Locator utilities: step lists, display paths, resolution and replacement.

A locator is a tuple of steps, each a ``str`` (object key) or ``int`` (array
index). The display form is the dotted/bracketed notation shown in the grid:

  a.Text            -> ("a", "Text")
  b[0].Text         -> ("b", 0, "Text")
  [2].Text          -> (2, "Text")
  ['odd.key'].Text  -> ("odd.key", "Text")
"""

from __future__ import annotations

import re

from .errors import ResolutionError

Step = str | int

_PLAIN_KEY = re.compile(r"[A-Za-z_$][A-Za-z0-9_$-]*\Z")


def _is_index(step: object) -> bool:
    return isinstance(step, int) and not isinstance(step, bool)


def format_path(steps: tuple[Step, ...] | list[Step]) -> str:
    """Render steps in dotted/bracketed notation."""
    parts: list[str] = []
    for step in steps:
        if _is_index(step):
            parts.append(f"[{step}]")
        elif _PLAIN_KEY.match(step):
            parts.append(f".{step}" if parts else step)
        else:
            escaped = step.replace("\\", "\\\\").replace("'", "\\'")
            parts.append(f"['{escaped}']")
    return "".join(parts)


def parse_path(path: str) -> tuple[Step, ...]:
    """Parse a display path back into steps. Raises ValueError if malformed."""
    steps: list[Step] = []
    i = 0
    n = len(path)
    while i < n:
        ch = path[i]
        if ch == "[":
            if path.startswith("['", i):
                key, i = _read_quoted(path, i + 2)
                if not path.startswith("]", i):
                    raise ValueError(f"Expected ']' at position {i}")
                steps.append(key)
                i += 1
            else:
                end = path.find("]", i)
                if end == -1:
                    raise ValueError("Unclosed bracket")
                index_str = path[i + 1 : end]
                if not index_str.isdigit():
                    raise ValueError(f"Invalid index: {index_str!r}")
                steps.append(int(index_str))
                i = end + 1
            continue

        if ch == ".":
            if not steps:
                raise ValueError("Path cannot start with '.'")
            i += 1
        elif steps:
            raise ValueError(f"Unexpected character {ch!r} at position {i}")

        match = _PLAIN_KEY.match(path[i:].split(".", 1)[0].split("[", 1)[0])
        if match is None:
            raise ValueError(f"Invalid key at position {i}")
        steps.append(match.group(0))
        i += match.end()
    return tuple(steps)


def _read_quoted(path: str, start: int) -> tuple[str, int]:
    """Read a single-quoted key body starting after the opening quote."""
    chars: list[str] = []
    i = start
    while i < len(path):
        ch = path[i]
        if ch == "\\" and i + 1 < len(path):
            chars.append(path[i + 1])
            i += 2
            continue
        if ch == "'":
            return "".join(chars), i + 1
        chars.append(ch)
        i += 1
    raise ValueError("Unterminated quoted key")


def resolve_path(data: object, steps: tuple[Step, ...] | list[Step]) -> object:
    """Return the node at *steps* in *data*."""
    current = data
    for depth, step in enumerate(steps):
        if isinstance(current, dict) and isinstance(step, str):
            if step not in current:
                raise ResolutionError(
                    f"Key {step!r} not found at {format_path(steps[:depth]) or '$'}"
                )
            current = current[step]
        elif isinstance(current, list) and _is_index(step):
            if not 0 <= step < len(current):
                raise ResolutionError(
                    f"Index {step} out of range at {format_path(steps[:depth]) or '$'}"
                )
            current = current[step]
        else:
            raise ResolutionError(
                f"Cannot step into {type(current).__name__} with {step!r}"
            )
    return current


def replace_at_path(
    data: object, steps: tuple[Step, ...] | list[Step], value: str
) -> str:
    """Replace the string at *steps* with *value*. Returns the previous value."""
    if not steps:
        raise ResolutionError("Cannot replace the document root")
    parent = resolve_path(data, steps[:-1])
    old = resolve_path(parent, steps[-1:])
    if not isinstance(old, str):
        raise ResolutionError(
            f"{format_path(steps)} holds {type(old).__name__}, not a string"
        )
    parent[steps[-1]] = value  # type: ignore[index]
    return old
