"""CLI entry point.

This script polls Slurm and writes each merged job list to stdout as one JSON
line (a serialized `JobsUpdate`).

Examples:
    python run_watch.py --once
    python run_watch.py --interval 5 --squeue-arg=--me --sacct-arg=--user=$USER
    python run_watch.py --history-hours 6 --log-level DEBUG

Settings not given on the command line come from `JOB_WATCHER_*` environment
variables (see `job_watcher.config.Settings`).
"""

from __future__ import annotations

import argparse
import json
import logging
import queue
import sys
from typing import Any, Dict, List, Optional

from job_watcher.config import Settings, get_settings
from job_watcher.models import JobsUpdate
from job_watcher.watcher import build_watcher, start_watcher

logger = logging.getLogger("job_watcher")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Watch Slurm running and recently finished jobs.")
    p.add_argument("--interval", type=float, default=None, help="Poll interval in seconds.")
    p.add_argument(
        "--squeue-arg",
        action="append",
        default=None,
        help="Extra argument forwarded to squeue (repeatable).",
    )
    p.add_argument(
        "--sacct-arg",
        action="append",
        default=None,
        help="Extra argument forwarded to sacct (repeatable).",
    )
    p.add_argument("--history-hours", type=int, default=None, help="How far back to list finished jobs.")
    p.add_argument("--once", action="store_true", help="Run a single cycle and exit.")
    p.add_argument("--log-level", default="WARNING", help="Logging level (written to stderr).")
    return p.parse_args(argv)


def settings_from_args(args: argparse.Namespace, base: Settings) -> Settings:
    """Apply CLI overrides on top of environment-derived settings."""
    overrides: Dict[str, Any] = {}
    if args.interval is not None:
        overrides["interval_s"] = args.interval
    if args.squeue_arg is not None:
        overrides["squeue_args"] = args.squeue_arg
    if args.sacct_arg is not None:
        overrides["sacct_args"] = args.sacct_arg
    if args.history_hours is not None:
        overrides["history_window_hours"] = args.history_hours
    # Re-validate so CLI values get the same checks as env values.
    return Settings(**{**base.model_dump(), **overrides})


def write_update(update: JobsUpdate) -> None:
    # Use json mode so the output is plain JSON types
    sys.stdout.write(json.dumps(update.model_dump(mode="json"), ensure_ascii=False) + "\n")
    sys.stdout.flush()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    settings = settings_from_args(args, get_settings())
    updates: "queue.Queue[JobsUpdate]" = queue.Queue()

    if args.once:
        watcher = build_watcher(updates, settings)
        result = watcher.tick()
        if not result.ok:
            logger.error(f"Poll failed: {result.error}")
            return 1
        write_update(updates.get_nowait())
        return 0

    handle = start_watcher(updates, settings)
    try:
        while True:
            write_update(updates.get())
    except KeyboardInterrupt:
        pass
    finally:
        handle.stop(timeout=1.0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
