"""Disk-backed snapshot store.

Snapshot files live in one folder under a root directory:

- Default root:    the current working directory at construction time
- Default folder:  `SNAPCORE_SNAPSHOTS_FOLDER` setting or `__snapshots__`
- File name:       `<basename of the source file><ext>`, e.g. `test_api.py.snap`

With ``use_relative_path`` the source file's directory (relative to the root)
is kept below the folder, so two `test_api.py` files in different packages do
not share a snapshot file::

    <root>/__snapshots__/tests/unit/test_api.py.snap

Sources outside the root fall back to the flat layout.

Usage
-----
>>> store = FileSnapshotStore(root=tmp_path)
>>> store.save_records("tests/test_api.py", {"health 1": {"ok": True}}, ".snap")
>>> store.load_records("tests/test_api.py", ".snap")
{'health 1': {'ok': True}}
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from snapcore.core.settings import get_logger, load_settings

from .base import Records, SnapshotStore
from .format import encode_text, parse_records, render_records

logger = get_logger("snapcore.storage")


class FileSnapshotStore(SnapshotStore):
    """Persist snapshot records as files on disk."""

    def __init__(self, root: Path | None = None, folder: str | None = None) -> None:
        self.root: Path = (root if root is not None else Path.cwd()).resolve()
        self.folder: str = folder if folder is not None else load_settings().snapshots_folder

    def snapshot_path(self, file: str, ext: str, *, use_relative_path: bool = False) -> Path:
        """Return the snapshot file that backs the source ``file``."""
        source = Path(file)
        if not source.is_absolute():
            source = self.root / source
        base = self.root / self.folder
        if use_relative_path:
            try:
                base = base / source.parent.resolve().relative_to(self.root)
            except ValueError:
                logger.debug("source %s is outside %s; using flat layout", file, self.root)
        return base / f"{source.name}{ext}"

    def load_records(
        self, file: str, ext: str, *, use_relative_path: bool = False
    ) -> Records | None:
        path = self.snapshot_path(file, ext, use_relative_path=use_relative_path)
        if not path.exists():
            logger.debug("no snapshot file %s", path)
            return None
        source = path.read_text(encoding="utf-8")
        records = parse_records(source, origin=str(path))
        logger.debug("loaded %d snapshot(s) from %s", len(records), path)
        return records

    def save_records(
        self,
        file: str,
        records: Records,
        ext: str,
        *,
        sort_snapshots: bool = True,
        use_relative_path: bool = False,
    ) -> None:
        """Write ``records`` to disk; an empty mapping removes the file."""
        path = self.snapshot_path(file, ext, use_relative_path=use_relative_path)
        if not records:
            path.unlink(missing_ok=True)
            logger.debug("removed empty snapshot file %s", path)
            return

        data = encode_text(render_records(records, sort_snapshots=sort_snapshots), str(path))
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write next to the target and swap it in; the old file stays intact on failure.
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            # mkstemp creates 0600 files
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("saved %d snapshot(s) to %s", len(records), path)

    def path_relative_to_cwd(self, file: str) -> str:
        if not Path(file).is_absolute():
            return super().path_relative_to_cwd(str(self.root / file))
        return super().path_relative_to_cwd(file)


__all__ = ["FileSnapshotStore"]
