"""
Pruning of stale snapshot entries.

After a complete test run, every key that was produced during the run is
known. Any key still stored in a snapshot file but not produced anymore
belongs to a deleted or renamed test and can be removed.

The run orchestrator (a test-framework plugin, usually) owns the decision of
*when* to prune, because only it knows that the run covered every test of a
file. This module provides the two pieces it needs:

- `UsageRecorder`: collects ``(file, key, ext)`` triples while the engine runs.
- `Pruner`       : removes unused keys, one backing file at a time.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass

from snapcore.core.settings import get_logger, load_settings
from snapcore.storage.base import SnapshotStore

logger = get_logger("snapcore.prune")


@dataclass(frozen=True, slots=True)
class SnapshotUsage:
    """One snapshot key observed during a run."""

    file: str
    key: str
    ext: str


class UsageRecorder:
    """Accumulate the snapshot keys seen during a run (order preserving)."""

    __slots__ = ("_seen",)

    def __init__(self) -> None:
        self._seen: dict[SnapshotUsage, None] = {}

    def record(self, file: str, key: str, ext: str) -> None:
        """Remember that ``key`` was produced for ``file``."""
        self._seen[SnapshotUsage(file=file, key=key, ext=ext)] = None

    def usages(self) -> tuple[SnapshotUsage, ...]:
        """Return every recorded usage in first-seen order."""
        return tuple(self._seen)

    def keys_for(self, file: str, ext: str) -> set[str]:
        """Return the keys recorded for one backing file."""
        return {u.key for u in self._seen if u.file == file and u.ext == ext}

    def clear(self) -> None:
        """Forget everything recorded so far."""
        self._seen.clear()

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._seen)


class Pruner:
    """Remove snapshot entries that were not produced by the current run."""

    def __init__(self, store: SnapshotStore) -> None:
        self.store = store

    def prune_snapshots(
        self,
        file: str,
        used_keys: Collection[str],
        ext: str | None = None,
        *,
        sort_snapshots: bool = True,
        use_relative_path: bool = False,
    ) -> list[str]:
        """
        Drop every key of ``file`` that is not in ``used_keys``.

        Parameters
        ----------
        file:
            Source file whose snapshot file is pruned.
        used_keys:
            Keys produced for ``file`` during the run.
        ext:
            Snapshot file extension; defaults to the configured one.

        Returns
        -------
        list[str]
            The removed keys, in file order. Nothing is written when the list
            is empty.
        """
        extension = ext if ext is not None else load_settings().default_extension
        records = self.store.load_records(file, extension, use_relative_path=use_relative_path)
        if not records:
            return []

        keep = set(used_keys)
        removed = [key for key in records if key not in keep]
        if not removed:
            return []

        pruned = {key: value for key, value in records.items() if key in keep}
        self.store.save_records(
            file,
            pruned,
            extension,
            sort_snapshots=sort_snapshots,
            use_relative_path=use_relative_path,
        )
        logger.info("pruned %d snapshot(s) from %s%s", len(removed), file, extension)
        return removed

    def prune_run(
        self,
        usages: Iterable[SnapshotUsage],
        *,
        sort_snapshots: bool = True,
        use_relative_path: bool = False,
    ) -> dict[str, list[str]]:
        """Prune every backing file that appears in ``usages``.

        Files that never showed up in the run are left alone: without any
        usage there is no evidence the run covered them.
        """
        grouped: dict[tuple[str, str], set[str]] = {}
        for usage in usages:
            grouped.setdefault((usage.file, usage.ext), set()).add(usage.key)

        removed: dict[str, list[str]] = {}
        for (file, ext), keys in grouped.items():
            dropped = self.prune_snapshots(
                file,
                keys,
                ext,
                sort_snapshots=sort_snapshots,
                use_relative_path=use_relative_path,
            )
            if dropped:
                removed.setdefault(file, []).extend(dropped)
        return removed


__all__ = ["Pruner", "SnapshotUsage", "UsageRecorder"]
