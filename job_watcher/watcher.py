"""The poll loop.

Each cycle queries `squeue` and `sacct`, fills the gaps in the finished records
from the cache, and publishes the merged list (running first, then finished) to
a single consumer. A failed query skips publishing for that cycle; the cache is
kept and the next cycle retries after an exponential backoff.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Protocol

from .cache import JobCache
from .commands import CommandError
from .config import Settings, get_settings
from .models import JobsUpdate, PollResult
from .paths import FilenameTemplateResolver
from .sources.base import JobSource
from .sources.sacct import SacctSource
from .sources.squeue import SqueueSource

logger = logging.getLogger(__name__)

# Caps the backoff exponent; the delay is bounded by max_backoff_s anyway.
MAX_BACKOFF_EXPONENT = 16


class Channel(Protocol):
    def put(self, item: Any) -> None: ...


class JobWatcher:
    """Polls the scheduler and publishes `JobsUpdate` messages to `channel`."""

    def __init__(
        self,
        channel: Channel,
        running: JobSource,
        finished: JobSource,
        interval_s: float = 2.0,
        max_backoff_s: float = 60.0,
        cache: Optional[JobCache] = None,
    ) -> None:
        self._channel = channel
        self._running = running
        self._finished = finished
        self.interval_s = interval_s
        self.max_backoff_s = max(max_backoff_s, interval_s)
        self.cache = cache if cache is not None else JobCache()
        self.failures = 0

    def poll_once(self) -> PollResult:
        """Run one query/merge cycle without publishing."""
        try:
            running_jobs = self._running.fetch()
            finished_jobs = self._finished.fetch()
        except CommandError as e:
            return PollResult(ok=False, error=str(e))

        for job in running_jobs:
            self.cache.upsert(job)

        # A job can still be COMPLETING in squeue while sacct already lists it;
        # the running record wins.
        running_ids = {job.job_id for job in running_jobs}
        finished_jobs = [self.cache.backfill(job) for job in finished_jobs if job.job_id not in running_ids]
        jobs = tuple(running_jobs) + tuple(finished_jobs)

        self.cache.prune({job.job_id for job in jobs})
        return PollResult(ok=True, jobs=jobs)

    def tick(self) -> PollResult:
        """Poll once and publish on success."""
        result = self.poll_once()
        if result.ok:
            if self.failures:
                logger.info(f"Polling recovered after {self.failures} failed cycle(s)")
            self.failures = 0
            self._channel.put(JobsUpdate(jobs=result.jobs))
        else:
            self.failures += 1
            logger.warning(f"Poll cycle failed ({result.error}); retrying in {self.next_delay():.1f}s")
        return result

    def next_delay(self) -> float:
        if not self.failures:
            return self.interval_s
        exponent = min(self.failures, MAX_BACKOFF_EXPONENT)
        return min(self.interval_s * (2**exponent), self.max_backoff_s)

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """Poll until `stop_event` is set (forever if none is given)."""
        stop = stop_event or threading.Event()
        while not stop.is_set():
            self.tick()
            stop.wait(self.next_delay())


class WatcherHandle:
    """Owns the background thread running a `JobWatcher`."""

    def __init__(self, watcher: JobWatcher) -> None:
        self.watcher = watcher
        self._stop = threading.Event()
        self._thread = threading.Thread(target=watcher.run, args=(self._stop,), name="job-watcher", daemon=True)

    def start(self) -> "WatcherHandle":
        logger.info(f"Starting job watcher (interval={self.watcher.interval_s}s)")
        self._thread.start()
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        """Ask the loop to exit at its next wait and join the thread.

        A query that is already running is not interrupted.
        """
        self._stop.set()
        if self._thread.is_alive():
            self._thread.join(timeout)
        logger.info("Job watcher stopped")

    def is_alive(self) -> bool:
        return self._thread.is_alive()


def build_watcher(channel: Channel, settings: Optional[Settings] = None) -> JobWatcher:
    """Wire sources, resolver and cache from settings."""
    settings = settings or get_settings()
    resolver = FilenameTemplateResolver(no_val=settings.array_no_val)
    running = SqueueSource(command=settings.squeue_cmd, extra_args=settings.squeue_args, resolver=resolver)
    finished = SacctSource(
        command=settings.sacct_cmd,
        extra_args=settings.sacct_args,
        window_hours=settings.history_window_hours,
    )
    return JobWatcher(
        channel,
        running,
        finished,
        interval_s=settings.interval_s,
        max_backoff_s=settings.max_backoff_s,
    )


def start_watcher(channel: Channel, settings: Optional[Settings] = None) -> WatcherHandle:
    """Start polling in a daemon thread, publishing to `channel`."""
    return WatcherHandle(build_watcher(channel, settings)).start()
