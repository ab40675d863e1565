"""Job watcher package.

The package is structured around one normalized job record:
- `models.py` defines the schema every source produces (and the UI consumes).
- `sources/` contains per-command connectors (`squeue`, `sacct`).
- `normalize.py` contains deterministic field parsing shared by the sources.
- `watcher.py` runs the poll loop and publishes merged job lists.
"""
