"""Watcher configuration, read from the environment."""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .paths import SLURM_NO_VAL


class Settings(BaseSettings):
    """Watcher configuration.

    Values can be overridden via environment variables prefixed with
    `JOB_WATCHER_`. List values are given as JSON, e.g.
    `JOB_WATCHER_SQUEUE_ARGS='["--me"]'`.
    """

    model_config = SettingsConfigDict(env_prefix="JOB_WATCHER_", env_file=".env", extra="ignore")

    # Polling
    interval_s: float = Field(default=2.0, gt=0)
    max_backoff_s: float = Field(default=60.0, gt=0)

    # Commands (extra args are forwarded verbatim, before our fixed flags)
    squeue_cmd: str = "squeue"
    sacct_cmd: str = "sacct"
    squeue_args: List[str] = Field(default_factory=list)
    sacct_args: List[str] = Field(default_factory=list)

    # Deployment-specific Slurm constants
    history_window_hours: int = Field(default=1, ge=1)
    array_no_val: str = SLURM_NO_VAL


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
