"""
Generic async data access layer over a document database.

Provides a base repository with CRUD and paginated listing, the store
backends it runs on (MongoDB and in-memory), and pagination metadata.
"""

from docdao.core.exceptions import (
    DocDAOError,
    DuplicateKeyError,
    StoreError,
    StoreReadError,
    StoreWriteError,
)
from docdao.models.base import DocumentModel
from docdao.repositories.base import BaseRepository
from docdao.schemas.pagination import Pagination, paginate
from docdao.schemas.query import Projection, SortSpec

__version__ = "0.1.0"

__all__ = [
    "BaseRepository",
    "DocumentModel",
    "Pagination",
    "paginate",
    "SortSpec",
    "Projection",
    "DocDAOError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "DuplicateKeyError",
]
