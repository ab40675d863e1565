"""Data models for the job watcher.

The key idea: the UI should see a *stable* normalized schema regardless of
which Slurm command a record came from. `squeue` and `sacct` expose different
field sets, so both sources map into `Job` and the watcher fills the gaps.

This file uses Pydantic v2.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Job(BaseModel):
    """A normalized job record, one per job or per array task.

    Records are frozen; use `model_copy(update=...)` to derive a changed one.
    """

    model_config = ConfigDict(frozen=True)

    job_id: str = Field(..., description="Task-level id, e.g. '1234' or '1234_5'.")
    array_id: str = Field(..., description="Array parent id; equals job_id for plain jobs.")
    array_step: Optional[str] = Field(
        default=None,
        description="Array task index; None unless the job is a known array member.",
    )

    name: str = ""
    user: str = ""
    partition: str = ""
    nodelist: str = ""
    command: str = ""
    qos: str = ""

    state: str = ""
    state_compact: str = ""
    reason: Optional[str] = None

    time: str = Field(default="", description="Elapsed time as formatted by Slurm.")
    tres: str = Field(default="", description="Allocated TRES, e.g. 'cpu=4,mem=8G,node=1'.")

    stdout: Optional[str] = Field(default=None, description="Resolved stdout path, if known.")
    stderr: Optional[str] = Field(default=None, description="Resolved stderr path, if known.")


class JobsUpdate(BaseModel):
    """The message published to the UI once per successful poll cycle."""

    model_config = ConfigDict(frozen=True)

    jobs: Tuple[Job, ...] = ()


class PollResult(BaseModel):
    """Outcome of a single poll cycle."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    jobs: Tuple[Job, ...] = ()
    error: Optional[str] = None
