"""Unit tests for the snapshot file format (render + parse)."""

from __future__ import annotations

from typing import Any

import pytest

from snapcore.core.errors import EmptyTextSnapshotError, InvalidCallError, SnapshotFileError
from snapcore.storage.format import (
    MAX_DEPTH,
    export_text,
    parse_records,
    remove_extra_newlines,
    render_records,
)


def test_text_round_trip_is_exact() -> None:
    """The boundary newlines added on write are removed on read."""
    text = render_records({"k": "hello\nworld"})
    assert text == "snapshots['k'] = \"\"\"\nhello\nworld\n\"\"\"\n"
    assert parse_records(text) == {"k": "hello\nworld"}


def test_text_with_own_boundary_newlines_survives() -> None:
    records = {"k": "\nindented block\n"}
    assert parse_records(render_records(records)) == records


@pytest.mark.parametrize(
    "value",
    [
        'say """hi"""',
        "both \"\"\" and ''' quotes",
        "back\\slash and \\n literal",
        "tab\tcr\rnul\x00",
        "unicode: ü ✓",
    ],
)
def test_awkward_text_is_escaped(value: str) -> None:
    assert parse_records(render_records({"k": value})) == {"k": value}


def test_blank_text_is_rejected() -> None:
    with pytest.raises(EmptyTextSnapshotError, match="empty"):
        export_text("k", "   \n")


def test_structural_layout() -> None:
    text = render_records({"cfg": {"debug": True, "ports": [80, 443], "name": None}})
    assert text == (
        "snapshots['cfg'] = {\n"
        '  "debug": True,\n'
        '  "ports": [\n'
        "    80,\n"
        "    443\n"
        "  ],\n"
        '  "name": None\n'
        "}\n"
    )
    assert parse_records(text) == {"cfg": {"debug": True, "ports": [80, 443], "name": None}}


def test_nested_strings_are_not_unwrapped() -> None:
    """Only top-level text values carry boundary newlines."""
    records = {"k": {"body": "\nkeep\n"}}
    assert parse_records(render_records(records)) == records


def test_sorting_is_optional() -> None:
    records = {"b 1": 2, "a 1": 1}
    sorted_text = render_records(records)
    insertion_text = render_records(records, sort_snapshots=False)
    assert sorted_text.index("'a 1'") < sorted_text.index("'b 1'")
    assert insertion_text.index("'b 1'") < insertion_text.index("'a 1'")
    assert list(parse_records(insertion_text)) == ["b 1", "a 1"]


def test_entries_are_separated_by_blank_lines() -> None:
    text = render_records({"a": 1, "b": 2})
    assert text == "snapshots['a'] = 1\n\nsnapshots['b'] = 2\n"


def test_unsupported_values_are_rejected() -> None:
    with pytest.raises(InvalidCallError):
        render_records({"k": object()})


def test_empty_source_parses_to_empty_mapping() -> None:
    assert parse_records("") == {}
    assert parse_records("# only a comment\n") == {}


@pytest.mark.parametrize(
    "source",
    [
        "import os\n",
        "snapshots['k'] = open('x')\n",
        "other['k'] = 1\n",
        "snapshots[1] = 1\n",
        "snapshots['k'] = 1\nsnapshots['k'] = 2\n",
        "snapshots['k' = 1\n",
    ],
)
def test_invalid_files_are_reported(source: str) -> None:
    with pytest.raises(SnapshotFileError):
        parse_records(source, origin="bad.snap")


def test_remove_extra_newlines_rules() -> None:
    records = {"a": "\nx\n", "b": "\n", "c": "\nx", "d": 1}
    assert remove_extra_newlines(records) == {"a": "x", "b": "\n", "c": "\nx", "d": 1}


def _nested(depth: int) -> list[Any]:
    value: list[Any] = [1]
    for _ in range(depth - 1):
        value = [value]
    return value


def test_deepest_allowed_nesting_round_trips() -> None:
    records = {"deep": _nested(MAX_DEPTH)}
    assert parse_records(render_records(records)) == records


def test_nesting_beyond_limit_is_rejected() -> None:
    with pytest.raises(InvalidCallError, match="nested deeper"):
        render_records({"deep": _nested(250)})
