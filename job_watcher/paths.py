"""Slurm filename-pattern resolution.

Docs: https://slurm.schedmd.com/sbatch.html#SECTION_%3CB%3Efilename-pattern%3C/B%3E

`squeue` reports stdout/stderr as the templates given at submission time
(e.g. `logs/%x-%A_%a.out`). We expand them here so the UI can open the files.
"""

from __future__ import annotations

import os
import re
from typing import Optional, Pattern

from .normalize import NO_ARRAY_TASK


TOKEN_PATTERN = r"%(%|A|a|J|j|N|n|s|t|u|x)"

# Slurm's NO_VAL, printed for the array task id of non-array jobs.
SLURM_NO_VAL = "4294967294"

DEFAULT_OUTPUT = "slurm-%J.out"
DEFAULT_ARRAY_OUTPUT = "slurm-%A_%a.out"


class FilenameTemplateResolver:
    """Expand `%`-tokens in Slurm output path templates.

    The compiled token pattern is owned by the instance; pass one in to share
    it between resolvers.
    """

    def __init__(self, pattern: Optional[Pattern[str]] = None, no_val: str = SLURM_NO_VAL) -> None:
        self._pattern = pattern if pattern is not None else re.compile(TOKEN_PATTERN)
        self._no_val = no_val

    def resolve(
        self,
        template: str,
        *,
        array_job_id: str,
        array_task_id: Optional[str],
        job_id: str,
        nodelist: str,
        user: str,
        name: str,
        working_dir: str,
    ) -> str:
        """Return the concrete path for `template` in the given job context."""
        has_task = array_task_id is not None and array_task_id != NO_ARRAY_TASK
        task_id = array_task_id if has_task else self._no_val

        path = template
        if not path:
            path = os.path.join(working_dir, DEFAULT_ARRAY_OUTPUT if has_task else DEFAULT_OUTPUT)

        replacements = {
            "%": "%",
            "A": array_job_id,
            "a": task_id,
            "J": job_id,
            "j": job_id,
            "N": nodelist.split(",", 1)[0],
            "n": "0",
            "s": "batch",
            "t": "0",
            "u": user,
            "x": name,
        }

        # Replacements differ in length from their 2-char tokens, so splice from
        # the rightmost match backwards to keep earlier match offsets valid.
        matches = list(self._pattern.finditer(path))
        for m in reversed(matches):
            path = path[: m.start()] + replacements[m.group(1)] + path[m.end():]

        return path
