"""Snapshot file format: rendering and parsing of record mappings.

A snapshot file is a sequence of Python literal assignments, one per key::

    snapshots['renders title 1'] = \"\"\"
    <h1>Hello</h1>
    \"\"\"

    snapshots['parses config 1'] = {
      "debug": True,
      "retries": 3
    }

Files are read with :func:`ast.parse` + :func:`ast.literal_eval` only; nothing
in a snapshot file is ever executed.

Two value shapes
----------------
- **Text** is written triple-quoted and wrapped in one extra newline on each
  side so the first line of a long block starts on its own line. On load, any
  string longer than one character that starts *and* ends with a newline loses
  exactly one newline on each end, which restores the original content.
- **Everything else** is written as an indented literal (JSON-like layout,
  Python constants ``True``/``False``/``None``).

Empty or blank text cannot be stored.
"""

from __future__ import annotations

import ast
import json
import math
import re
from collections.abc import Mapping
from typing import Any, cast

from snapcore.core.errors import EmptyTextSnapshotError, InvalidCallError, SnapshotFileError

TARGET = "snapshots"
INDENT = "  "
# The tokenizer refuses more than 200 open brackets on one statement.
MAX_DEPTH = 100

# Control characters other than \t and \n would be mangled by the tokenizer.
_CONTROL = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")


def _quote_text(text: str) -> str:
    body = text.replace("\\", "\\\\")
    body = _CONTROL.sub(lambda m: f"\\x{ord(m.group()):02x}", body)
    if '"""' not in body:
        return f'"""{body}"""'
    if "'''" not in body:
        return f"'''{body}'''"
    return '"""' + body.replace('"', '\\"') + '"""'


def _literal(value: Any, level: int) -> str:
    """Render ``value`` as an indented Python literal."""
    if value is None or isinstance(value, bool):
        return repr(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value) if math.isfinite(value) else "None"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if level >= MAX_DEPTH and isinstance(value, Mapping | list | tuple) and value:
        raise InvalidCallError(
            f"Cannot store a value nested deeper than {MAX_DEPTH} levels in a snapshot file"
        )
    pad = INDENT * (level + 1)
    close = INDENT * level
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        items = [
            f"{pad}{json.dumps(str(k), ensure_ascii=False)}: {_literal(v, level + 1)}"
            for k, v in value.items()
        ]
        return "{\n" + ",\n".join(items) + f"\n{close}}}"
    if isinstance(value, list | tuple):
        if not value:
            return "[]"
        items = [f"{pad}{_literal(v, level + 1)}" for v in value]
        return "[\n" + ",\n".join(items) + f"\n{close}]"
    raise InvalidCallError(f"Cannot store {type(value).__name__} in a snapshot file: {value!r}")


def export_text(key: str, value: str) -> str:
    """Render one text record, wrapping ``value`` in boundary newlines."""
    if not value.strip():
        raise EmptyTextSnapshotError(key)
    wrapped = "\n" + value + "\n"
    return f"{TARGET}[{key!r}] = {_quote_text(wrapped)}\n"


def export_value(key: str, value: Any) -> str:
    """Render one structural record."""
    return f"{TARGET}[{key!r}] = {_literal(value, 0)}\n"


def export_record(key: str, value: Any) -> str:
    """Render one record, picking the text or structural layout."""
    if isinstance(value, str):
        return export_text(key, value)
    return export_value(key, value)


def render_records(records: Mapping[str, Any], *, sort_snapshots: bool = True) -> str:
    """Render a full record mapping as snapshot file text."""
    keys = sorted(records) if sort_snapshots else list(records)
    return "\n".join(export_record(key, records[key]) for key in keys)


def encode_text(text: str, origin: str = "<snapshots>") -> bytes:
    """Return the UTF-8 bytes of rendered snapshot text.

    Raises
    ------
    InvalidCallError
        If the text holds characters UTF-8 cannot carry (lone surrogates).
    """
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidCallError(f"Cannot encode snapshot text for {origin}: {exc}") from exc


def _surrounded_by_newlines(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 1 and value[0] == "\n" and value[-1] == "\n"


def remove_extra_newlines(records: Mapping[str, Any]) -> dict[str, Any]:
    """Undo the boundary newlines that :func:`export_text` adds."""
    return {
        key: value[1:-1] if _surrounded_by_newlines(value) else value
        for key, value in records.items()
    }


def _is_record_target(targets: list[ast.expr]) -> bool:
    """Return True for exactly one ``snapshots[...]`` assignment target."""
    if len(targets) != 1:
        return False
    target = targets[0]
    return (
        isinstance(target, ast.Subscript)
        and isinstance(target.value, ast.Name)
        and target.value.id == TARGET
    )


def parse_records(source: str, origin: str = "<snapshots>") -> dict[str, Any]:
    """Parse snapshot file text back into a record mapping.

    Raises
    ------
    SnapshotFileError
        If the text is not valid Python, contains anything other than
        ``snapshots[<str>] = <literal>`` statements, or repeats a key.
    """
    try:
        tree = ast.parse(source, filename=origin)
    except SyntaxError as exc:
        raise SnapshotFileError(f"Cannot parse snapshot file {origin}: {exc}") from exc

    records: dict[str, Any] = {}
    for node in tree.body:
        if not (isinstance(node, ast.Assign) and _is_record_target(node.targets)):
            raise SnapshotFileError(
                f"Unexpected statement in snapshot file {origin} at line {node.lineno}"
            )
        target = cast(ast.Subscript, node.targets[0])
        try:
            key = ast.literal_eval(target.slice)
            value = ast.literal_eval(node.value)
        except ValueError as exc:
            raise SnapshotFileError(
                f"Non-literal snapshot in {origin} at line {node.lineno}: {exc}"
            ) from exc
        if not isinstance(key, str):
            raise SnapshotFileError(f"Snapshot key must be a string in {origin}: {key!r}")
        if key in records:
            raise SnapshotFileError(f"Duplicate snapshot key {key!r} in {origin}")
        records[key] = value
    return remove_extra_newlines(records)


__all__ = [
    "MAX_DEPTH",
    "encode_text",
    "export_record",
    "export_text",
    "export_value",
    "parse_records",
    "remove_extra_newlines",
    "render_records",
]
