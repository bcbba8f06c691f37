"""
Golink storage module.

This module implements the Strategy Pattern for pluggable golink storage:
a volatile in-memory backend and a durable SQLite backend behind one contract.
"""

from .exceptions import StorageError, AlreadyExistsError, StorageNotFoundError, BackendFaultError
from .models import Golink
from .strategies import GolinkStorage, InMemoryGolinkStorage, SQLiteGolinkStorage, MAX_PAGE_SIZE
from .factory import StorageFactory, StorageBackend

__all__ = [
    "StorageError",
    "AlreadyExistsError",
    "StorageNotFoundError",
    "BackendFaultError",
    "Golink",
    "GolinkStorage",
    "InMemoryGolinkStorage",
    "SQLiteGolinkStorage",
    "MAX_PAGE_SIZE",
    "StorageFactory",
    "StorageBackend",
]
