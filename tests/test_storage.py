"""Unit tests for the disk-backed and in-memory snapshot stores."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from snapcore.core.errors import InvalidCallError, SnapshotMismatchError
from snapcore.core.snapshot.compare import compare
from snapcore.storage.filesystem import FileSnapshotStore
from snapcore.storage.memory import MemorySnapshotStore


@pytest.fixture
def disk(tmp_path: Path) -> FileSnapshotStore:
    return FileSnapshotStore(root=tmp_path, folder="__snapshots__")


def test_missing_file_loads_as_none(disk: FileSnapshotStore) -> None:
    assert disk.load_records("tests/test_api.py", ".snap") is None


def test_save_then_load_round_trip(disk: FileSnapshotStore) -> None:
    records: dict[str, Any] = {"health 1": {"ok": True}, "banner 1": "line one\nline two"}
    disk.save_records("tests/test_api.py", records, ".snap")

    path = disk.root / "__snapshots__" / "test_api.py.snap"
    assert path.exists()
    assert disk.load_records("tests/test_api.py", ".snap") == records
    # sorted by default
    content = path.read_text(encoding="utf-8")
    assert content.index("'banner 1'") < content.index("'health 1'")


def test_relative_path_layout(disk: FileSnapshotStore) -> None:
    source = str(disk.root / "tests" / "unit" / "test_api.py")
    flat = disk.snapshot_path(source, ".snap")
    nested = disk.snapshot_path(source, ".snap", use_relative_path=True)

    assert flat == disk.root / "__snapshots__" / "test_api.py.snap"
    assert nested == disk.root / "__snapshots__" / "tests" / "unit" / "test_api.py.snap"

    disk.save_records(source, {"k": 1}, ".snap", use_relative_path=True)
    assert nested.exists()
    assert disk.load_records(source, ".snap") is None
    assert disk.load_records(source, ".snap", use_relative_path=True) == {"k": 1}


def test_relative_path_outside_root_falls_back_to_flat(
    disk: FileSnapshotStore, tmp_path_factory: pytest.TempPathFactory
) -> None:
    elsewhere = tmp_path_factory.mktemp("elsewhere") / "test_x.py"
    path = disk.snapshot_path(str(elsewhere), ".snap", use_relative_path=True)
    assert path == disk.root / "__snapshots__" / "test_x.py.snap"


def test_saving_empty_mapping_removes_file(disk: FileSnapshotStore) -> None:
    disk.save_records("t.py", {"k": 1}, ".snap")
    disk.save_records("t.py", {}, ".snap")
    assert not disk.snapshot_path("t.py", ".snap").exists()
    assert disk.load_records("t.py", ".snap") is None


def test_path_relative_to_cwd(disk: FileSnapshotStore, monkeypatch: Any) -> None:
    monkeypatch.chdir(disk.root)
    assert disk.path_relative_to_cwd(str(disk.root / "tests" / "t.py")) == "tests/t.py"
    assert disk.path_relative_to_cwd("tests/t.py") == "tests/t.py"


def test_memory_store_contract() -> None:
    """Unknown file -> None; an existing empty file -> {}."""
    mem = MemorySnapshotStore({("seeded.py", ".snap", False): ""})
    assert mem.load_records("unknown.py", ".snap") is None
    assert mem.load_records("seeded.py", ".snap") == {}


def test_memory_store_keeps_rendered_text() -> None:
    mem = MemorySnapshotStore()
    value = {"a": [1, 2]}
    mem.save_records("t.py", {"k": value}, ".snap")
    value["a"].append(3)

    assert mem.revision == 1
    assert mem.load_records("t.py", ".snap") == {"k": {"a": [1, 2]}}
    assert mem.text("t.py", ".snap") is not None
    assert mem.files() == (("t.py", ".snap", False),)


def test_default_raiser(disk: FileSnapshotStore) -> None:
    disk.raise_if_different(value={"a": 1}, expected={"a": 1}, test_id="t", compare=compare)
    with pytest.raises(SnapshotMismatchError) as info:
        disk.raise_if_different(value={"a": 2}, expected={"a": 1}, test_id="t", compare=compare)
    message = str(info.value)
    assert "'t'" in message
    assert '{"a":1} !== {"a":2}' in message


def test_unencodable_text_keeps_existing_file(disk: FileSnapshotStore) -> None:
    disk.save_records("t.py", {"precious": {"keep": 1}}, ".snap")
    path = disk.snapshot_path("t.py", ".snap")
    before = path.read_text(encoding="utf-8")

    with pytest.raises(InvalidCallError, match="encode"):
        disk.save_records("t.py", {"precious": {"keep": 1}, "new": "bad \ud800 text"}, ".snap")

    assert path.read_text(encoding="utf-8") == before
    assert disk.load_records("t.py", ".snap") == {"precious": {"keep": 1}}
    assert [p.name for p in path.parent.iterdir()] == ["t.py.snap"]


def test_memory_store_rejects_unencodable_text() -> None:
    mem = MemorySnapshotStore()
    with pytest.raises(InvalidCallError):
        mem.save_records("t.py", {"k": "bad \ud800 text"}, ".snap")
    assert mem.revision == 0
    assert mem.text("t.py", ".snap") is None
