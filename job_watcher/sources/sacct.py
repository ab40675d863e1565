"""`sacct` source connector: recently finished jobs.

Docs: https://slurm.schedmd.com/sacct.html

Not all fields we need to build a Job are available via `sacct` (most notably
stdout/stderr). We still grab as many as possible so the records are useful
even before the watcher has seen the job in `squeue`; paths are backfilled
from the cache by the watcher.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..models import Job
from ..normalize import compact_state, parse_reason, split_array_id, strip_submit_line
from .base import FIELD_SEPARATOR, CommandRunner, JobSource


FINISHED_STATES = ("COMPLETED", "CANCELLED", "FAILED", "TIMEOUT", "PREEMPTED", "OUT_OF_MEMORY")


class SacctSource(JobSource):
    """Fetch finished jobs from the accounting database and normalize them."""

    name = "sacct"
    fields = (
        "jobid",
        "jobname",
        "state",
        "user",
        "elapsed",
        "alloctres",
        "partition",
        "nodelist",
        "submitline",
        "reason",
        "qos",
    )

    def __init__(
        self,
        command: str = "sacct",
        extra_args: Optional[Sequence[str]] = None,
        runner: Optional[CommandRunner] = None,
        window_hours: int = 1,
    ) -> None:
        super().__init__(command, extra_args, runner)
        self.window_hours = window_hours

    def build_args(self) -> List[str]:
        return [
            *self.extra_args,
            "--array",
            "--noheader",
            "--format",
            ",".join(self.fields),
            "--delimiter",
            FIELD_SEPARATOR,
            "-X",
            "--parsable",
            "--starttime",
            f"now-{self.window_hours}hours",
            "--endtime",
            "now",
            "--state",
            ",".join(FINISHED_STATES),
        ]

    def parse_row(self, row: List[str]) -> Job:
        job_id, name, state, user, time, tres, partition, nodelist, submit_line, reason, qos = row
        array_id, array_step = split_array_id(job_id)

        return Job(
            job_id=job_id,
            array_id=array_id,
            array_step=array_step,
            name=name,
            user=user,
            partition=partition,
            nodelist=nodelist,
            command=strip_submit_line(submit_line),
            qos=qos,
            state=state,
            state_compact=compact_state(state),
            reason=parse_reason(reason),
            time=time,
            tres=tres,
        )
