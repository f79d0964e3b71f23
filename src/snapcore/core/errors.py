"""Exception hierarchy raised by the snapshot engine and its stores.

Every error derives from :class:`SnapshotError` so test-framework adapters can
catch engine failures in one place. Mismatches additionally subclass
``AssertionError`` so plain test runners report them as failed assertions
rather than errors.
"""

from __future__ import annotations


class SnapshotError(Exception):
    """Base class for all snapcore errors."""


class InvalidCallError(SnapshotError, ValueError):
    """A snapshot call is missing a required field or carries an invalid one."""


class CIWriteForbiddenError(SnapshotError):
    """A new baseline would be written while running on CI."""

    def __init__(self, *, file: str, key: str, name: str) -> None:
        self.file = file
        self.key = key
        self.name = name
        super().__init__(
            "Cannot store new snapshot value\n"
            f"in {file!r}\n"
            f"for snapshot called {name!r}\n"
            f"test key {key!r}\n"
            "when running on CI (options.ci = True)"
        )


class SnapshotMismatchError(SnapshotError, AssertionError):
    """The current value differs from the stored baseline."""

    def __init__(self, *, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Different value of snapshot {name!r}\n{detail}")


class EmptyTextSnapshotError(SnapshotError, ValueError):
    """A text snapshot has no content worth storing."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            "Cannot store empty / blank string as a snapshot value.\n"
            f"Seems the value you are trying to store in snapshot {key!r}\n"
            "is empty. Snapshots only work well if they have actual content\n"
            "to store."
        )


class SnapshotFileError(SnapshotError):
    """A snapshot file exists but its content cannot be parsed."""


__all__ = [
    "CIWriteForbiddenError",
    "EmptyTextSnapshotError",
    "InvalidCallError",
    "SnapshotError",
    "SnapshotFileError",
    "SnapshotMismatchError",
]
