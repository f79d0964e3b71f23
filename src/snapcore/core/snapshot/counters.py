"""Per-test counter registry.

Every non-exact snapshot call inside one test gets the next 1-based index for
that test identifier, which makes keys such as ``"renders title 1"``,
``"renders title 2"`` reproducible from run to run. The registry lives only in
memory and must be reset between independent runs (for example between test
files) so indexes do not drift.

Design Notes
------------
- One registry per engine. Two engines only share counts when the caller hands
  them the same registry instance.
- No locking: calls for one run are assumed not to interleave on the same
  test identifier.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType


class CounterRegistry:
    """In-memory mapping from test identifier to snapshot calls seen so far."""

    __slots__ = ("_counts",)

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}

    def next_index(self, test_id: str) -> int:
        """Increment and return the 1-based snapshot index for ``test_id``."""
        index = self._counts.get(test_id, 0) + 1
        self._counts[test_id] = index
        return index

    def count(self, test_id: str) -> int:
        """Return how many indexes were handed out for ``test_id`` (0 if none)."""
        return self._counts.get(test_id, 0)

    def reset_all(self) -> None:
        """Forget every counter."""
        self._counts.clear()

    def reset_one(self, test_id: str) -> None:
        """Forget the counter of ``test_id`` only."""
        self._counts.pop(test_id, None)

    def snapshot(self) -> Mapping[str, int]:
        """Return a read-only view of the current counts."""
        return MappingProxyType(self._counts)

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._counts)


__all__ = ["CounterRegistry"]
