"""snapcore: record a value as a baseline on first run, compare it on every run after.

Typical embedding (a test-framework adapter)::

    from snapcore import FileSnapshotStore, SnapshotCall, SnapshotEngine

    engine = SnapshotEngine(FileSnapshotStore())
    engine.evaluate(SnapshotCall(value=result, file=__file__, test_id="parses config"))
"""

from __future__ import annotations

from snapcore.core.contracts.call import SnapshotCall, SnapshotHooks, SnapshotOptions
from snapcore.core.contracts.value import UNSET, Immediate, Pending
from snapcore.core.errors import (
    CIWriteForbiddenError,
    EmptyTextSnapshotError,
    InvalidCallError,
    SnapshotError,
    SnapshotFileError,
    SnapshotMismatchError,
)
from snapcore.core.snapshot.compare import compare
from snapcore.core.snapshot.counters import CounterRegistry
from snapcore.core.snapshot.engine import SnapshotEngine, form_key
from snapcore.core.snapshot.normalize import normalize
from snapcore.core.snapshot.prune import Pruner, SnapshotUsage, UsageRecorder
from snapcore.storage import FileSnapshotStore, MemorySnapshotStore, SnapshotStore

__all__ = [
    "CIWriteForbiddenError",
    "CounterRegistry",
    "EmptyTextSnapshotError",
    "FileSnapshotStore",
    "Immediate",
    "InvalidCallError",
    "MemorySnapshotStore",
    "Pending",
    "Pruner",
    "SnapshotCall",
    "SnapshotEngine",
    "SnapshotError",
    "SnapshotFileError",
    "SnapshotHooks",
    "SnapshotMismatchError",
    "SnapshotOptions",
    "SnapshotStore",
    "SnapshotUsage",
    "UNSET",
    "UsageRecorder",
    "__version__",
    "compare",
    "form_key",
    "normalize",
]
__version__ = "0.1.0"
