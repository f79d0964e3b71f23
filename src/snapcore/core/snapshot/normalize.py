"""Value normalizer: the canonical, re-comparable form of a snapshot value.

Snapshots compare *serializable structure* only. Before a value is stored or
compared it goes through a JSON serialize/deserialize round trip, which

- severs every reference to the caller's objects (a defensive deep copy),
- turns tuples into lists and non-string dict keys into strings,
- drops what JSON cannot express (class identity, callables nested in
  containers) and turns NaN / infinity into ``None``.

Callables at the top level are returned unchanged: they are not serializable,
but some callers compare them by reference.

Python objects that have an obvious JSON shape are converted first:

- Pydantic models -> ``model_dump(mode="json")``
- dataclass instances -> ``dataclasses.asdict``
- enum members -> their value
- sets / frozensets -> lists (sorted when the items allow it)
- other objects -> their public instance attributes, or ``str(obj)``

Circular references cannot be represented and raise :class:`InvalidCallError`.
"""

from __future__ import annotations

import dataclasses
import json
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel

from snapcore.core.errors import InvalidCallError

_SCALARS = (str, int, float, bool, type(None))


def _key(key: Any) -> str | int | float | bool | None:
    if isinstance(key, _SCALARS):
        return key
    raise InvalidCallError(f"Cannot use {type(key).__name__} as a snapshot dict key: {key!r}")


def _prepare(value: Any, active: set[int]) -> Any:
    """Return a JSON-ready tree for ``value``.

    ``active`` holds the ids of the containers on the current path so a cycle
    is reported instead of recursing forever.
    """
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, _SCALARS):
        return value
    marker = id(value)
    if marker in active:
        raise InvalidCallError("Cannot snapshot a value with circular references")
    active.add(marker)
    try:
        if isinstance(value, BaseModel):
            return _prepare(value.model_dump(mode="json"), active)
        if isinstance(value, Enum):
            return _prepare(value.value, active)
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return _prepare(dataclasses.asdict(value), active)
        if isinstance(value, Mapping):
            return {
                _key(k): _prepare(v, active) for k, v in value.items() if not callable(v)
            }
        if isinstance(value, list | tuple):
            return [None if callable(v) else _prepare(v, active) for v in value]
        if isinstance(value, set | frozenset):
            items = [_prepare(v, active) for v in value if not callable(v)]
            try:
                return sorted(items)
            except TypeError:
                return items
        if hasattr(value, "__dict__"):
            public = {k: v for k, v in vars(value).items() if not k.startswith("_")}
            return _prepare(public, active)
        return str(value)
    finally:
        active.discard(marker)


def normalize(value: Any) -> Any:
    """Return the canonical copy of ``value`` used for storing and comparing."""
    if callable(value):
        return value
    return json.loads(json.dumps(_prepare(value, set())))


__all__ = ["normalize"]
