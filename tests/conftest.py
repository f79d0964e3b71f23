"""Shared fixtures for the snapcore test-suite.

Every engine built here gets explicit settings so the suite behaves the same
on a laptop and on a CI runner (where `CI=true` would otherwise forbid new
baselines).
"""

from __future__ import annotations

import io
from collections.abc import Iterator

import pytest
from rich.console import Console

from snapcore.core.settings import Settings, load_settings
from snapcore.core.snapshot.engine import SnapshotEngine
from snapcore.storage.memory import MemorySnapshotStore


@pytest.fixture(autouse=True)
def _fresh_settings_cache() -> Iterator[None]:
    """Drop the cached settings after each test so env tweaks do not leak."""
    yield
    load_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(SNAPCORE_CI=False, SNAPSHOT_UPDATE=False)


@pytest.fixture
def console() -> Console:
    """A console that writes into memory instead of the terminal."""
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def store() -> MemorySnapshotStore:
    return MemorySnapshotStore()


@pytest.fixture
def engine(store: MemorySnapshotStore, settings: Settings, console: Console) -> SnapshotEngine:
    return SnapshotEngine(store, settings=settings, console=console)
