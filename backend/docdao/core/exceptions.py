"""
Exception taxonomy for the data access layer.

Store backends translate driver errors into these types at their boundary.
Repositories never catch-and-translate: they log and re-raise unchanged.
"""

from typing import Optional


class DocDAOError(Exception):
    """Base error for the package."""


class StoreError(DocDAOError):
    """
    Raised when the underlying document store fails.

    Attributes:
        collection: Name of the collection the call targeted
        operation: Store operation that failed (insert_one, find_many, ...)
    """

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message)
        self.collection = collection
        self.operation = operation


class StoreReadError(StoreError):
    """Raised when a read (get, find, count, listing) fails."""


class StoreWriteError(StoreError):
    """Raised when a write (insert, update, delete) fails."""


class DuplicateKeyError(StoreWriteError):
    """Raised when an insert or update violates a unique index."""
