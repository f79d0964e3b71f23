"""Abstract snapshot record store.

The engine never touches files directly. It talks to a `SnapshotStore`, which
loads and saves the record mapping of one backing file. Which implementation
is used (disk, memory, something host specific) is decided by the embedding
application when it constructs the engine.

Contract
--------
- ``load_records`` returns ``None`` when no snapshot file exists yet. An
  existing file without records yields ``{}``.
- ``save_records`` persists the full mapping; the store owns the on-disk
  representation (see :mod:`snapcore.storage.format`).
- ``raise_if_different`` is the default raiser used when a baseline exists.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from snapcore.core.contracts.call import CompareFn
from snapcore.core.errors import SnapshotMismatchError

Records = dict[str, Any]


def raise_if_different(*, value: Any, expected: Any, test_id: str, compare: CompareFn) -> None:
    """Raise :class:`SnapshotMismatchError` when ``compare`` reports a difference."""
    outcome = compare(expected=expected, value=value)
    if outcome.is_err():
        raise SnapshotMismatchError(name=test_id, detail=str(outcome.unwrap_err()))


class SnapshotStore(ABC):
    """Load/save record mappings for backing files."""

    @abstractmethod
    def load_records(
        self, file: str, ext: str, *, use_relative_path: bool = False
    ) -> Records | None:
        """Return the records stored for ``file`` or ``None`` if there is no file."""

    @abstractmethod
    def save_records(
        self,
        file: str,
        records: Records,
        ext: str,
        *,
        sort_snapshots: bool = True,
        use_relative_path: bool = False,
    ) -> None:
        """Persist ``records`` as the full content of the snapshot file for ``file``."""

    def path_relative_to_cwd(self, file: str) -> str:
        """Return ``file`` relative to the working directory, for messages."""
        path = Path(file)
        if not path.is_absolute():
            return path.as_posix()
        try:
            return Path(os.path.relpath(path, Path.cwd())).as_posix()
        except ValueError:
            # different drive on Windows
            return path.as_posix()

    def raise_if_different(
        self, *, value: Any, expected: Any, test_id: str, compare: CompareFn
    ) -> None:
        """Default raiser; see :func:`raise_if_different`."""
        raise_if_different(value=value, expected=expected, test_id=test_id, compare=compare)


__all__ = ["Records", "SnapshotStore", "raise_if_different"]
