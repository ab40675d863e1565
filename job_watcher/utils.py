"""Utility helpers shared across the watcher."""

from __future__ import annotations

from typing import List, Optional


def split_fields(line: str, separator: str, n_fields: int) -> Optional[List[str]]:
    """Split a separator-terminated line into its `n_fields` values.

    Slurm writes the separator after every field, so a complete line splits
    into `n_fields + 1` parts with an empty last part. Anything else is a
    partial or garbled line and yields None.
    """
    parts = line.strip().split(separator)
    if len(parts) != n_fields + 1:
        return None
    return parts[:n_fields]

