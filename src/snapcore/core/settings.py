"""Centralized snapcore configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files in the working directory: .env, .env.local, .env.test

The values here only provide *defaults*; every one of them can be overridden
per call through :class:`snapcore.core.contracts.call.SnapshotOptions`.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .environment import detect_ci

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed snapcore configuration loaded from env and `.env` files.

    Attributes
    ----------
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    ci_override : bool | None
        Forces the CI flag on or off; maps from `SNAPCORE_CI`. When unset the
        flag is detected from well-known CI environment variables.
    update : bool
        Replace existing baselines instead of comparing; maps from `SNAPSHOT_UPDATE`.
    snapshots_folder : str
        Directory name that holds snapshot files; maps from `SNAPCORE_SNAPSHOTS_FOLDER`.
    default_extension : str
        Extension appended to snapshot file names; maps from `SNAPCORE_EXTENSION`.
    """

    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    ci_override: bool | None = Field(default=None, alias="SNAPCORE_CI")
    update: bool = Field(default=False, alias="SNAPSHOT_UPDATE")
    snapshots_folder: str = Field(default="__snapshots__", alias="SNAPCORE_SNAPSHOTS_FOLDER")
    default_extension: str = Field(default=".snap", alias="SNAPCORE_EXTENSION")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.test"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("default_extension")
    @classmethod
    def _extension_has_dot(cls, v: str) -> str:
        """Snapshot extensions are always written with their leading dot."""
        if not v.startswith("."):
            raise ValueError(f"extension should start with '.', got {v!r}")
        return v

    @property
    def is_ci(self) -> bool:
        """Return True when new baselines must not be written."""
        if self.ci_override is not None:
            return self.ci_override
        return detect_ci(os.environ)

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "snapcore") -> logging.Logger:
    """Return a process-global logger configured to the current log level."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
