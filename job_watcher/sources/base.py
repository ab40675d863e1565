"""Base classes for source connectors."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Sequence

from ..commands import run_command
from ..models import Job
from ..utils import split_fields

logger = logging.getLogger(__name__)

# Written after every field by both commands; must not occur inside values.
FIELD_SEPARATOR = "###jobwatch###"

CommandRunner = Callable[[str, Sequence[str]], List[str]]


class JobSource(ABC):
    """Abstract base class for a Slurm query connector.

    Subclasses declare their `fields`, build the command line, and map one
    validated row to a `Job`. Lines that do not split into exactly
    `len(fields) + 1` parts are dropped.
    """

    name: str
    fields: Sequence[str]

    def __init__(
        self,
        command: str,
        extra_args: Optional[Sequence[str]] = None,
        runner: Optional[CommandRunner] = None,
    ) -> None:
        self.command = command
        self.extra_args = list(extra_args or [])
        self._runner = runner or run_command

    @abstractmethod
    def build_args(self) -> List[str]:
        """Return the full argument list (extra args first, then fixed flags)."""
        raise NotImplementedError

    @abstractmethod
    def parse_row(self, row: List[str]) -> Job:
        """Map one validated row of `len(fields)` values to a Job."""
        raise NotImplementedError

    def parse(self, lines: Iterable[str]) -> List[Job]:
        """Parse command output, keeping source line order."""
        out: List[Job] = []
        dropped = 0
        for line in lines:
            row = split_fields(line, FIELD_SEPARATOR, len(self.fields))
            if row is None:
                dropped += 1
                continue
            out.append(self.parse_row(row))
        if dropped:
            logger.debug(f"{self.name}: dropped {dropped} malformed line(s)")
        return out

    def fetch(self) -> List[Job]:
        """Run the query and return normalized jobs. Raises CommandError."""
        return self.parse(self._runner(self.command, self.build_args()))
