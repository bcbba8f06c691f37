"""
Errors raised by golink storage backends.

Both backends classify failures the same way, so the service layer can
map them without knowing which backend is in use.
"""


class StorageError(Exception):
    """Base class for all storage errors"""


class AlreadyExistsError(StorageError):
    """A golink with the same short_link is already stored"""

    def __init__(self, short_link: str):
        super().__init__(f"Golink already exists: {short_link}")
        self.short_link = short_link


class StorageNotFoundError(StorageError):
    """No golink is stored under the given short_link"""

    def __init__(self, short_link: str):
        super().__init__(f"Golink not found: {short_link}")
        self.short_link = short_link


class BackendFaultError(StorageError):
    """Lower-level failure (I/O, connectivity, unclassified engine error)"""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
