"""Deferred-value contract for snapshot calls.

A test may hand the engine a value it already has, or one that is still being
produced (a coroutine, task or future). Instead of sniffing for awaitables, the
two cases are spelled out:

- `Immediate(value)` : the value is ready; evaluation runs synchronously.
- `Pending(awaitable)`: evaluation awaits the awaitable exactly once and then
  proceeds synchronously with the resolved value.

Raw values passed to a call are treated as `Immediate`.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Final, Generic, TypeVar

T = TypeVar("T")


class _Unset:
    """Marker type for "no value was given" (distinct from ``None``)."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


@dataclass(frozen=True, slots=True)
class Immediate(Generic[T]):
    """A value that is available right away."""

    value: T


@dataclass(frozen=True, slots=True)
class Pending(Generic[T]):
    """A value that becomes available once ``awaitable`` resolves."""

    awaitable: Awaitable[T]


SnapshotValue = Immediate[Any] | Pending[Any]


def as_snapshot_value(value: Any) -> SnapshotValue:
    """Wrap ``value`` as :class:`Immediate` unless it already is a variant."""
    if isinstance(value, Immediate | Pending):
        return value
    return Immediate(value)


__all__ = ["UNSET", "Immediate", "Pending", "SnapshotValue", "as_snapshot_value"]
