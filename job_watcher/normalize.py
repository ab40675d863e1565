"""Normalization helpers.

This module contains the deterministic field parsing shared by the sources:
- mapping Slurm's "no value" markers to None
- state compaction for `sacct` records
- submit-line cleanup so `sacct` commands look like `squeue` ones
- array id derivation from composite `sacct` job ids
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple


# Long state names as printed by `sacct`, mapped to the short codes `squeue`
# prints in its `statecompact` column.
STATE_COMPACT: Dict[str, str] = {
    "RUNNING": "R",
    "PENDING": "PD",
    "COMPLETED": "CD",
    "CANCELLED": "CA",
    "FAILED": "F",
    "TIMEOUT": "TO",
    "NODE_FAIL": "NF",
    "PREEMPTED": "PR",
    "SUSPENDED": "S",
}

NO_ARRAY_TASK = "N/A"
NO_REASON = "None"

SUBMIT_TOOL = "sbatch"
FLAG_PREFIX = "-"
ARRAY_SEPARATOR = "_"


def compact_state(state: str) -> str:
    """Return the short code for a state, or the state itself if unknown."""
    return STATE_COMPACT.get(state, state)


def parse_reason(reason: str) -> Optional[str]:
    """Slurm prints the literal 'None' when there is no pending/fail reason."""
    if not reason or reason == NO_REASON:
        return None
    return reason


def parse_array_step(array_task_id: str) -> Optional[str]:
    if not array_task_id or array_task_id == NO_ARRAY_TASK:
        return None
    return array_task_id


def strip_submit_line(submit_line: str) -> str:
    """Drop the leading `sbatch` invocation and its flags from a submit line.

    `sacct` reports the full line, e.g. `sbatch --time=1:00 -p gpu run.sh in.txt`,
    while `squeue` reports just the script part (`run.sh in.txt`). If nothing is
    left after stripping, the raw line is returned unchanged.
    """
    tokens = submit_line.split()
    i = 0
    while i < len(tokens) and (tokens[i].startswith(SUBMIT_TOOL) or tokens[i].startswith(FLAG_PREFIX)):
        i += 1
    command = " ".join(tokens[i:])
    return command or submit_line


def split_array_id(job_id: str) -> Tuple[str, Optional[str]]:
    """Derive (array_id, array_step) from a job id such as '1234_7'.

    `sacct` does not expose array ids as separate columns. Ids that do not
    split into exactly two non-empty parts are treated as plain jobs.
    """
    parts = job_id.split(ARRAY_SEPARATOR)
    if len(parts) == 2 and parts[0] and parts[1]:
        return parts[0], parts[1]
    return job_id, None
