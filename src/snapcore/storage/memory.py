"""
In-memory snapshot store.

Hosts without a usable filesystem (sandboxed runners, browsers driving a
Python interpreter, unit tests of adapters) can seed this store with snapshot
file texts and read the updated texts back after a run.

The store keeps the *rendered* text of every file rather than the Python
objects, so the exact serialization rules of :mod:`snapcore.storage.format`
apply here too: text values round-trip through boundary newlines, blank text is
rejected, and loaded values never alias values that were saved.

Design Goals
------------
- **Same contract as disk**: ``None`` for an unknown file, ``{}`` for a file
  that exists without records.
- **Observable**: every save bumps a revision counter, which tests use to
  assert that nothing was written.

Differences from disk
---------------------
Entries are keyed by ``(file, ext, use_relative_path)`` exactly as given. The
same file saved with and without ``use_relative_path`` therefore lands in two
separate entries, even where :class:`FileSnapshotStore` would resolve both to
one path (a source without a directory part). No path normalization happens
either: ``"t.py"`` and ``"./t.py"`` are different files here.
"""

from __future__ import annotations

from collections.abc import Mapping

from .base import Records, SnapshotStore
from .format import encode_text, parse_records, render_records

Location = tuple[str, str, bool]


class MemorySnapshotStore(SnapshotStore):
    """
    Dictionary-backed snapshot store.

    Attributes
    ----------
    _files : dict[Location, str]
        Rendered snapshot text keyed by ``(file, ext, use_relative_path)``.
    _rev : int
        Number of saves performed so far.
    """

    __slots__ = ("_files", "_rev")

    def __init__(self, initial: Mapping[Location, str] | None = None) -> None:
        self._files: dict[Location, str] = dict(initial or {})
        self._rev: int = 0

    def load_records(
        self, file: str, ext: str, *, use_relative_path: bool = False
    ) -> Records | None:
        text = self._files.get((file, ext, use_relative_path))
        if text is None:
            return None
        return parse_records(text, origin=f"{file}{ext}")

    def save_records(
        self,
        file: str,
        records: Records,
        ext: str,
        *,
        sort_snapshots: bool = True,
        use_relative_path: bool = False,
    ) -> None:
        location = (file, ext, use_relative_path)
        if records:
            text = render_records(records, sort_snapshots=sort_snapshots)
            encode_text(text, f"{file}{ext}")
            self._files[location] = text
        else:
            self._files.pop(location, None)
        self._rev += 1

    # ------------------------------- Inspection -----------------------------

    def text(self, file: str, ext: str, *, use_relative_path: bool = False) -> str | None:
        """Return the rendered snapshot text for ``file``, if any."""
        return self._files.get((file, ext, use_relative_path))

    def files(self) -> tuple[Location, ...]:
        """Return the known locations, sorted (stable for tests)."""
        return tuple(sorted(self._files))

    @property
    def revision(self) -> int:
        """Number of saves performed so far."""
        return self._rev


__all__ = ["Location", "MemorySnapshotStore"]
