"""Unit tests for pruning stale snapshot entries."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from snapcore.core.settings import Settings
from snapcore.core.snapshot.engine import SnapshotEngine
from snapcore.core.snapshot.prune import Pruner, SnapshotUsage, UsageRecorder
from snapcore.storage.filesystem import FileSnapshotStore
from snapcore.storage.memory import MemorySnapshotStore

SOURCE = "tests/test_pages.py"


def test_unused_keys_are_removed(store: MemorySnapshotStore) -> None:
    store.save_records(SOURCE, {"A": 1, "B": 2, "C": 3}, ".snap")

    removed = Pruner(store).prune_snapshots(SOURCE, {"A", "C"}, ".snap")

    assert removed == ["B"]
    assert store.load_records(SOURCE, ".snap") == {"A": 1, "C": 3}


def test_nothing_to_remove_does_not_save(store: MemorySnapshotStore) -> None:
    store.save_records(SOURCE, {"A": 1}, ".snap")
    before = store.revision

    assert Pruner(store).prune_snapshots(SOURCE, ["A", "unrelated"], ".snap") == []
    assert store.revision == before


def test_missing_file_is_a_noop(store: MemorySnapshotStore) -> None:
    assert Pruner(store).prune_snapshots("nowhere.py", [], ".snap") == []
    assert store.revision == 0


def test_prune_run_uses_recorded_keys(
    store: MemorySnapshotStore, settings: Settings, console: Console
) -> None:
    store.save_records(SOURCE, {"old test 1": "x", "page 1": "stale"}, ".snap")
    store.save_records("other.py", {"untouched 1": 1}, ".snap")

    recorder = UsageRecorder()
    engine = SnapshotEngine(store, settings=settings, recorder=recorder, console=console)
    engine.match("stale", file=SOURCE, test_id="page")

    removed = Pruner(store).prune_run(recorder.usages())

    assert removed == {SOURCE: ["old test 1"]}
    assert store.load_records(SOURCE, ".snap") == {"page 1": "stale"}
    assert store.load_records("other.py", ".snap") == {"untouched 1": 1}


def test_prune_run_groups_by_file_and_extension(store: MemorySnapshotStore) -> None:
    store.save_records(SOURCE, {"a": 1, "b": 2}, ".snap")
    store.save_records(SOURCE, {"a": 1, "b": 2}, ".golden")
    usages = [
        SnapshotUsage(file=SOURCE, key="a", ext=".snap"),
        SnapshotUsage(file=SOURCE, key="b", ext=".golden"),
    ]

    removed = Pruner(store).prune_run(usages)

    assert sorted(removed[SOURCE]) == ["a", "b"]
    assert store.load_records(SOURCE, ".snap") == {"a": 1}
    assert store.load_records(SOURCE, ".golden") == {"b": 2}


def test_pruning_everything_removes_the_file(tmp_path: Path) -> None:
    disk = FileSnapshotStore(root=tmp_path, folder="__snapshots__")
    disk.save_records(SOURCE, {"gone 1": 1}, ".snap")

    assert Pruner(disk).prune_snapshots(SOURCE, set(), ".snap") == ["gone 1"]
    assert not disk.snapshot_path(SOURCE, ".snap").exists()
