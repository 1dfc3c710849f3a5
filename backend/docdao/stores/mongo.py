"""
MongoDB collection backend.

Adapts a pymongo AsyncCollection to IDocumentCollection. This is the only
place driver and BSON encoding exceptions are translated into the package's
error taxonomy; the driver exception is always chained.
"""

import contextlib
from typing import Any, List, Mapping, Optional

import pymongo
from bson.errors import BSONError
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError
from pymongo.errors import PyMongoError

from docdao.core.exceptions import DuplicateKeyError, StoreReadError, StoreWriteError
from docdao.models.base import ID_FIELD
from docdao.stores.interfaces import Document, Filter, IDocumentCollection, SortKeys


# Encoding failures surface as BSONError, or ValueError for unconfigured UUIDs
_READ_ERRORS = (PyMongoError, BSONError)
_WRITE_ERRORS = (PyMongoError, BSONError, ValueError)


def _deadline(timeout: Optional[float]):
    """Apply a client-side deadline to the enclosed operations, if given."""
    if timeout is None:
        return contextlib.nullcontext()
    return pymongo.timeout(timeout)


class MongoCollection(IDocumentCollection):
    """
    IDocumentCollection backed by a pymongo AsyncCollection.

    Attributes:
        collection: The wrapped AsyncCollection

    Example:
        >>> client = AsyncMongoClient("mongodb://localhost:27017")
        >>> users = MongoCollection(client["app"]["users"])
        >>> await users.count({})
        0
    """

    def __init__(self, collection: AsyncCollection):
        self.collection = collection

    @property
    def name(self) -> str:
        return self.collection.name

    def _read_error(self, operation: str, exc: Exception) -> StoreReadError:
        return StoreReadError(
            f"{operation} on '{self.name}' failed: {exc}",
            collection=self.name,
            operation=operation,
        )

    def _write_error(self, operation: str, exc: Exception) -> StoreWriteError:
        if isinstance(exc, MongoDuplicateKeyError):
            return DuplicateKeyError(
                f"{operation} on '{self.name}' violated a unique index: {exc}",
                collection=self.name,
                operation=operation,
            )
        return StoreWriteError(
            f"{operation} on '{self.name}' failed: {exc}",
            collection=self.name,
            operation=operation,
        )

    async def insert_one(
        self,
        document: Document,
        timeout: Optional[float] = None
    ) -> Any:
        try:
            with _deadline(timeout):
                result = await self.collection.insert_one(document)
        except _WRITE_ERRORS as e:
            raise self._write_error("insert_one", e) from e
        return result.inserted_id

    async def find_by_id(
        self,
        entity_id: Any,
        projection: Optional[Mapping[str, int]] = None,
        timeout: Optional[float] = None
    ) -> Optional[Document]:
        try:
            with _deadline(timeout):
                return await self.collection.find_one({ID_FIELD: entity_id}, projection)
        except _READ_ERRORS as e:
            raise self._read_error("find_by_id", e) from e

    async def find_one(
        self,
        filter: Filter,
        projection: Optional[Mapping[str, int]] = None,
        timeout: Optional[float] = None
    ) -> Optional[Document]:
        try:
            with _deadline(timeout):
                return await self.collection.find_one(dict(filter), projection)
        except _READ_ERRORS as e:
            raise self._read_error("find_one", e) from e

    async def find_many(
        self,
        filter: Filter,
        projection: Optional[Mapping[str, int]] = None,
        sort: Optional[SortKeys] = None,
        skip: int = 0,
        limit: int = 0,
        timeout: Optional[float] = None
    ) -> List[Document]:
        try:
            with _deadline(timeout):
                cursor = self.collection.find(dict(filter), projection)
                if sort:
                    cursor = cursor.sort(list(sort))
                if skip:
                    cursor = cursor.skip(skip)
                if limit:
                    cursor = cursor.limit(limit)
                return await cursor.to_list(length=None)
        except _READ_ERRORS as e:
            raise self._read_error("find_many", e) from e

    async def update_by_id(
        self,
        entity_id: Any,
        fields: Mapping[str, Any],
        timeout: Optional[float] = None
    ) -> Optional[Document]:
        try:
            with _deadline(timeout):
                return await self.collection.find_one_and_update(
                    {ID_FIELD: entity_id},
                    {"$set": dict(fields)},
                    return_document=ReturnDocument.AFTER,
                )
        except _WRITE_ERRORS as e:
            raise self._write_error("update_by_id", e) from e

    async def delete_one(
        self,
        filter: Filter,
        timeout: Optional[float] = None
    ) -> int:
        try:
            with _deadline(timeout):
                result = await self.collection.delete_one(dict(filter))
        except _WRITE_ERRORS as e:
            raise self._write_error("delete_one", e) from e
        return result.deleted_count

    async def count(
        self,
        filter: Filter,
        timeout: Optional[float] = None
    ) -> int:
        try:
            with _deadline(timeout):
                return await self.collection.count_documents(dict(filter))
        except _READ_ERRORS as e:
            raise self._read_error("count", e) from e
