"""`squeue` source connector: currently running and pending jobs.

Docs: https://slurm.schedmd.com/squeue.html

We request an explicit `--Format` with our separator after every field, expand
job arrays to one row per task, and resolve the stdout/stderr templates.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..models import Job
from ..normalize import parse_array_step, parse_reason
from ..paths import FilenameTemplateResolver
from .base import FIELD_SEPARATOR, CommandRunner, JobSource


class SqueueSource(JobSource):
    """Fetch active jobs from `squeue` and normalize them."""

    name = "squeue"
    fields = (
        "jobid",
        "name",
        "state",
        "username",
        "timeused",
        "tres-alloc",
        "partition",
        "nodelist",
        "stdout",
        "stderr",
        "command",
        "statecompact",
        "reason",
        "qos",
        "ArrayJobID",  # %A
        "ArrayTaskID",  # %a
        "NodeList",  # %N
        "WorkDir",  # default output location
    )

    def __init__(
        self,
        command: str = "squeue",
        extra_args: Optional[Sequence[str]] = None,
        runner: Optional[CommandRunner] = None,
        resolver: Optional[FilenameTemplateResolver] = None,
    ) -> None:
        super().__init__(command, extra_args, runner)
        self._resolver = resolver or FilenameTemplateResolver()

    @property
    def output_format(self) -> str:
        return ",".join(f"{f}:{FIELD_SEPARATOR}" for f in self.fields)

    def build_args(self) -> List[str]:
        return [*self.extra_args, "--array", "--noheader", "--Format", self.output_format]

    def parse_row(self, row: List[str]) -> Job:
        (
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
            array_job_id,
            array_task_id,
            node_list,
            working_dir,
        ) = row

        context = dict(
            array_job_id=array_job_id,
            array_task_id=array_task_id,
            job_id=job_id,
            nodelist=node_list,
            user=user,
            name=name,
            working_dir=working_dir,
        )

        return Job(
            job_id=job_id,
            array_id=array_job_id,
            array_step=parse_array_step(array_task_id),
            name=name,
            user=user,
            partition=partition,
            nodelist=nodelist,
            command=command,
            qos=qos,
            state=state,
            state_compact=state_compact,
            reason=parse_reason(reason),
            time=time,
            tres=tres,
            stdout=self._resolver.resolve(stdout, **context),
            stderr=self._resolver.resolve(stderr, **context),
        )
