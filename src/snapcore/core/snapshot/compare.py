"""Default structural comparator.

Two values match when their compact JSON serializations are identical. This
is deliberately strict: it is type sensitive (``1`` vs ``"1"``) and order
sensitive, including the key order of dicts, because key order changes the
serialized string. Callers that want a looser notion of equality pass their
own ``compare`` hook.
"""

from __future__ import annotations

import json
from typing import Any

from snapcore.core.result import Result, err, ok


def serialize(value: Any) -> str:
    """Return the compact JSON form used for comparison and diagnostics."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=repr)


def compare(*, expected: Any, value: Any) -> Result[None, str]:
    """Return ``Ok(None)`` when both serialized forms are equal, else ``Err``.

    The error payload reads ``"<expected> !== <value>"``.
    """
    e = serialize(expected)
    v = serialize(value)
    if e == v:
        return ok(None)
    return err(f"{e} !== {v}")


__all__ = ["compare", "serialize"]
