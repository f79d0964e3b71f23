"""Contracts describing one snapshot call.

This module defines the inputs the engine accepts:

- `SnapshotOptions`: Pydantic v2 model of the behavioral switches (CI guard,
  sorting, relative paths, console output, dry run, update).
- `SnapshotHooks`  : the three optional override points (transform, compare,
  raise). Each hook left as ``None`` selects the default at evaluation time.
- `SnapshotCall`   : everything the engine needs for one `evaluate()` call.

Contract notes
--------------
- ``value`` defaults to :data:`UNSET`; ``None`` is a legitimate snapshot value.
- ``file`` wins over ``source_file``; the latter is the caller's own source
  location and only serves as a fallback backing-file identifier.
- ``ci`` and ``update`` left as ``None`` are filled from settings.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

from snapcore.core.result import Result

from .value import UNSET

TransformFn = Callable[[Any], Any]
CompareFn = Callable[..., Result[None, str]]
RaiseFn = Callable[..., None]


class SnapshotOptions(BaseModel):
    """Behavioral switches for one snapshot call."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ci: bool | None = None
    sort_snapshots: bool = True
    use_relative_path: bool = False
    show: bool = False
    dry_run: bool = False
    update: bool | None = None


@dataclass(frozen=True, slots=True)
class SnapshotHooks:
    """Optional overrides for storing, comparing and raising.

    Fields
    ------
    transform : TransformFn | None
        Applied to a normalized value before it is stored as a new baseline.
    compare : CompareFn | None
        Called as ``compare(expected=..., value=...)``; returns a ``Result``.
    raiser : RaiseFn | None
        Called as ``raiser(value=..., expected=..., test_id=..., compare=...)``
        when a baseline exists; expected to raise when the values differ.
    """

    transform: TransformFn | None = None
    compare: CompareFn | None = None
    raiser: RaiseFn | None = None


@dataclass(slots=True)
class SnapshotCall:
    """All inputs of a single ``SnapshotEngine.evaluate`` call."""

    value: Any = UNSET
    file: str | None = None
    source_file: str | None = None
    test_id: str | None = None
    exact_key: str | None = None
    hooks: SnapshotHooks = field(default_factory=SnapshotHooks)
    ext: str | None = None
    comment: str | None = None
    options: SnapshotOptions | Mapping[str, Any] | None = None


__all__ = [
    "CompareFn",
    "RaiseFn",
    "SnapshotCall",
    "SnapshotHooks",
    "SnapshotOptions",
    "TransformFn",
]
