"""Core package initializer for snapcore.

Sub-modules are imported directly by callers, e.g.:
    from snapcore.core.settings import settings, load_settings, Settings, get_logger
    from snapcore.core.snapshot.engine import SnapshotEngine
"""

from __future__ import annotations

__all__ = ["__doc__"]
