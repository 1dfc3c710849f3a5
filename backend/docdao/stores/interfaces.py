"""
Document Collection Interface (IDocumentCollection)

Abstract base class defining the capability set repositories need from a
document store client. Any backend implementing it can sit behind
BaseRepository without changes to repository logic.

Implementation guide:
- All methods must be async
- Documents are plain dicts with the identity under `_id`
- Identities arrive already converted with to_store_id
- Driver errors must be raised as StoreReadError / StoreWriteError
- `timeout` is a per-call deadline in seconds; backends that cannot honour
  it may ignore it
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


Document = Dict[str, Any]
Filter = Mapping[str, Any]
SortKeys = Sequence[Tuple[str, int]]


class IDocumentCollection(ABC):
    """
    Abstract interface for a single collection of documents.

    Provides:
    1. Insert of a single document
    2. Lookup by identity or filter (single and multiple)
    3. Partial update by identity
    4. Delete by filter
    5. Count by filter
    6. Query composition with projection, sort, skip and limit
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Collection name, used for logging and error context."""

    @abstractmethod
    async def insert_one(
        self,
        document: Document,
        timeout: Optional[float] = None
    ) -> Any:
        """
        Insert a document.

        Args:
            document: Document to store; `_id` is generated when absent
            timeout: Optional deadline in seconds

        Returns:
            The stored `_id` value

        Raises:
            DuplicateKeyError: If the identity or a unique index collides
            StoreWriteError: For any other store failure
        """

    @abstractmethod
    async def find_by_id(
        self,
        entity_id: Any,
        projection: Optional[Mapping[str, int]] = None,
        timeout: Optional[float] = None
    ) -> Optional[Document]:
        """
        Fetch the document with the given identity.

        Returns:
            Document or None when absent

        Raises:
            StoreReadError: If the query fails
        """

    @abstractmethod
    async def find_one(
        self,
        filter: Filter,
        projection: Optional[Mapping[str, int]] = None,
        timeout: Optional[float] = None
    ) -> Optional[Document]:
        """
        Fetch the first document matching a filter.

        Returns:
            Document or None when nothing matches

        Raises:
            StoreReadError: If the query fails
        """

    @abstractmethod
    async def find_many(
        self,
        filter: Filter,
        projection: Optional[Mapping[str, int]] = None,
        sort: Optional[SortKeys] = None,
        skip: int = 0,
        limit: int = 0,
        timeout: Optional[float] = None
    ) -> List[Document]:
        """
        Fetch all documents matching a filter.

        Args:
            filter: Store filter predicate
            projection: Inclusion projection ({"field": 1, ...})
            sort: Ordered (field, direction) pairs
            skip: Number of matching documents to skip
            limit: Maximum number of documents (0 means no limit)
            timeout: Optional deadline in seconds

        Returns:
            List of documents, empty when nothing matches

        Raises:
            StoreReadError: If the query fails
        """

    @abstractmethod
    async def update_by_id(
        self,
        entity_id: Any,
        fields: Mapping[str, Any],
        timeout: Optional[float] = None
    ) -> Optional[Document]:
        """
        Set the given fields on the document with this identity.

        Returns:
            The document after the update, or None when absent

        Raises:
            StoreWriteError: If the update fails
        """

    @abstractmethod
    async def delete_one(
        self,
        filter: Filter,
        timeout: Optional[float] = None
    ) -> int:
        """
        Delete the first document matching a filter.

        Returns:
            Number of documents removed (0 or 1)

        Raises:
            StoreWriteError: If the delete fails
        """

    @abstractmethod
    async def count(
        self,
        filter: Filter,
        timeout: Optional[float] = None
    ) -> int:
        """
        Count documents matching a filter.

        Raises:
            StoreReadError: If the count fails
        """
