"""Running the Slurm query commands."""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """A query command could not be started or exited abnormally."""

    def __init__(self, command: str, message: str, returncode: Optional[int] = None) -> None:
        super().__init__(f"{command}: {message}")
        self.command = command
        self.returncode = returncode


def run_command(command: str, args: Sequence[str]) -> List[str]:
    """Run `command` with `args` and return its stdout as a list of lines.

    Blocks until the process exits; there is no timeout. Bytes that are not
    valid UTF-8 are replaced, so one garbled field only spoils its own line.
    """
    argv = [command, *args]
    logger.debug(f"Running {argv!r}")
    try:
        p = subprocess.run(argv, check=True, capture_output=True, encoding="utf-8", errors="replace")
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or (e.stdout or "").strip()
        raise CommandError(command, f"exited with rc={e.returncode}: {detail}", e.returncode) from e
    except OSError as e:
        raise CommandError(command, f"failed to start: {e}") from e
    return p.stdout.splitlines()
