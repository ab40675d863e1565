"""Shared fixtures: a scripted command runner and output-line builders."""

from typing import Dict, List, Sequence

import pytest

from job_watcher.commands import CommandError
from job_watcher.sources.base import FIELD_SEPARATOR


def make_line(*values: str) -> str:
    """Render values the way squeue/sacct do: separator after every field."""
    return "".join(f"{v}{FIELD_SEPARATOR}" for v in values)


def squeue_line(
    job_id="10",
    name="train",
    state="RUNNING",
    user="alice",
    time="1:23",
    tres="cpu=4,mem=8G,node=1",
    partition="gpu",
    nodelist="node01",
    stdout="/home/alice/out-%j.log",
    stderr="/home/alice/err-%j.log",
    command="/home/alice/run.sh",
    state_compact="R",
    reason="None",
    qos="normal",
    array_job_id=None,
    array_task_id="N/A",
    node_list=None,
    working_dir="/home/alice",
) -> str:
    return make_line(
        job_id,
        name,
        state,
        user,
        time,
        tres,
        partition,
        nodelist,
        stdout,
        stderr,
        command,
        state_compact,
        reason,
        qos,
        array_job_id if array_job_id is not None else job_id,
        array_task_id,
        node_list if node_list is not None else nodelist,
        working_dir,
    )


def sacct_line(
    job_id="10",
    name="train",
    state="COMPLETED",
    user="alice",
    time="00:05:00",
    tres="billing=4,cpu=4,mem=8G,node=1",
    partition="gpu",
    nodelist="node01",
    submit_line="sbatch --time=1:00 --partition=gpu /home/alice/run.sh",
    reason="None",
    qos="normal",
) -> str:
    return make_line(job_id, name, state, user, time, tres, partition, nodelist, submit_line, reason, qos)


class FakeRunner:
    """Returns queued outputs per command; an Exception entry is raised instead."""

    def __init__(self) -> None:
        self.outputs: Dict[str, List[object]] = {}
        self.calls: List[List[str]] = []

    def queue(self, command: str, output: object) -> None:
        self.outputs.setdefault(command, []).append(output)

    def __call__(self, command: str, args: Sequence[str]) -> List[str]:
        self.calls.append([command, *args])
        pending = self.outputs.get(command) or []
        out = pending.pop(0) if pending else []
        if isinstance(out, Exception):
            raise out
        return list(out)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def command_failure():
    return CommandError("squeue", "exited with rc=1: slurm_load_jobs error", 1)
