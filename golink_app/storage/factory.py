"""
Factory for creating golink storage instances.

The application builds exactly one storage at startup and passes it
around explicitly, so the factory keeps no cached instance.
"""

import logging
from enum import Enum

from .strategies import GolinkStorage, InMemoryGolinkStorage, SQLiteGolinkStorage

logger = logging.getLogger(__name__)


class StorageBackend(Enum):
    """Available golink storage backends"""
    MEMORY = "memory"
    SQLITE = "sqlite"


class StorageFactory:
    """Simple factory for creating golink storage backends."""

    @classmethod
    def create(cls, backend: StorageBackend, database_path: str = "./data/golinks.db") -> GolinkStorage:
        """
        Build a storage backend.

        Args:
            backend: Type of storage backend (from enum)
            database_path: SQLite file location (ignored for memory)

        Returns:
            A new GolinkStorage instance

        Raises:
            BackendFaultError: SQLite storage could not be initialized
            ValueError: unknown backend
        """
        if backend == StorageBackend.MEMORY:
            storage = InMemoryGolinkStorage()
            logger.info("✅ In-memory golink storage initialized")
            return storage

        if backend == StorageBackend.SQLITE:
            return SQLiteGolinkStorage(database_path=database_path)

        raise ValueError(f"Unknown storage backend: {backend}")
