"""Snapshot record stores.

Re-exports the store contract and the two bundled implementations:

- `SnapshotStore`      : abstract load/save contract used by the engine
- `FileSnapshotStore`  : snapshot files under `__snapshots__/`
- `MemorySnapshotStore`: rendered snapshot texts kept in a dict
"""

from __future__ import annotations

from .base import Records, SnapshotStore, raise_if_different
from .filesystem import FileSnapshotStore
from .memory import MemorySnapshotStore

__all__ = [
    "FileSnapshotStore",
    "MemorySnapshotStore",
    "Records",
    "SnapshotStore",
    "raise_if_different",
]
