"""Last-known job records, keyed by job id."""

from __future__ import annotations

from typing import AbstractSet, Dict, Optional

from .models import Job


class JobCache:
    """Remembers the richer `squeue` record of each job.

    Once a job leaves the queue it only shows up in `sacct`, which has no
    stdout/stderr. The cache keeps the paths around until the job drops out of
    both sources. Owned by a single watcher thread; not thread-safe.
    """

    def __init__(self) -> None:
        self._jobs: Dict[str, Job] = {}

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def get(self, job_id: str) -> Optional[Job]:
        return self._jobs.get(job_id)

    def upsert(self, job: Job) -> None:
        self._jobs[job.job_id] = job

    def backfill(self, job: Job) -> Job:
        """Return `job` with stdout/stderr copied from the cached record, if any."""
        cached = self._jobs.get(job.job_id)
        if cached is None:
            return job
        return job.model_copy(update={"stdout": cached.stdout, "stderr": cached.stderr})

    def prune(self, live_ids: AbstractSet[str]) -> None:
        """Drop every entry whose id is not in `live_ids`."""
        for job_id in [i for i in self._jobs if i not in live_ids]:
            del self._jobs[job_id]
