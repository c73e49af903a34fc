"""
Interval persistence: the repository contract and its interchangeable backends.
"""

from pathlib import Path
from typing import Union

from ..errors import ConfigurationError
from .base import IntervalRepository
from .memory_store import MemoryIntervalStore
from .sqlite_store import SQLiteIntervalStore

BACKENDS = ("memory", "sqlite")


def create_repository(backend: str = "sqlite",
                      db_path: Union[str, Path] = "pomo.db") -> IntervalRepository:
    """
    Build the repository backend selected by configuration.

    Args:
        backend: "memory" for a volatile store, "sqlite" for a durable one
        db_path: Database file used by the sqlite backend

    Returns:
        Repository instance
    """
    if backend == "memory":
        return MemoryIntervalStore()
    if backend == "sqlite":
        return SQLiteIntervalStore(db_path)
    raise ConfigurationError(
        f"Unknown repository backend: {backend!r}",
        field="storage.backend",
        value=backend
    )


__all__ = [
    "BACKENDS",
    "IntervalRepository",
    "MemoryIntervalStore",
    "SQLiteIntervalStore",
    "create_repository",
]
