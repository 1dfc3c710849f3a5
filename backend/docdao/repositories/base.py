"""
Generic repository for document entities.

Provides CRUD and paginated listing for a single entity type on top of any
IDocumentCollection. Entity repositories subclass BaseRepository and add
their specialized queries.
"""

import time
from typing import Any, Generic, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel

from docdao.core.config import settings
from docdao.core.exceptions import StoreError
from docdao.core.logging_config import get_logger, log_with_context
from docdao.models.base import ID_FIELD, DocumentModel, to_store_id
from docdao.schemas.pagination import Pagination, paginate
from docdao.schemas.query import Projection, SortSpec
from docdao.stores.interfaces import IDocumentCollection

logger = get_logger(__name__)

T = TypeVar("T", bound=DocumentModel)

SortArg = Union[str, SortSpec, None]
SelectArg = Union[str, Projection, None]


class BaseRepository(Generic[T]):
    """
    Repository providing CRUD and paginated listing for one entity type.

    The repository holds no per-call state: every result, including the
    record count behind pagination, travels through return values only, so
    a single instance is safe to share between concurrent tasks.

    Store failures are logged and re-raised unchanged. Absence is never an
    error: get, find_one and update return None, delete returns False.

    Attributes:
        collection: Store collection for this entity type
        model_cls: Entity model used to build results

    Example:
        >>> class User(DocumentModel):
        ...     name: str
        >>> class UserRepository(BaseRepository[User]):
        ...     model_cls = User
        >>> users = UserRepository(get_collection("users"))
        >>> ada = await users.create(User(name="Ada"))
        >>> records, pagination = await users.get_all(page=1, page_size=10)
    """

    model_cls: Type[DocumentModel]

    def __init__(
        self,
        collection: IDocumentCollection,
        model_cls: Optional[Type[T]] = None
    ):
        """
        Initialize repository with a store collection.

        Args:
            collection: Store collection backing this repository
            model_cls: Entity model (optional when set on the subclass)

        Raises:
            TypeError: If no model class is given or declared
        """
        if model_cls is not None:
            self.model_cls = model_cls
        elif getattr(type(self), "model_cls", None) is None:
            raise TypeError(
                f"{type(self).__name__} needs a model_cls (class attribute or argument)"
            )
        self.collection = collection

    def _to_entity(self, document: Optional[Mapping[str, Any]]) -> Optional[T]:
        if document is None:
            return None
        return self.model_cls.from_document(document)

    def _log(self, operation: str, started: float, **fields: Any) -> None:
        log_with_context(
            logger,
            "debug",
            f"{operation} completed",
            collection=self.collection.name,
            operation=operation,
            duration_ms=round((time.perf_counter() - started) * 1000, 3),
            **fields
        )

    def _log_failure(self, operation: str, exc: StoreError, **fields: Any) -> None:
        log_with_context(
            logger,
            "error",
            f"{operation} failed: {exc}",
            collection=self.collection.name,
            operation=operation,
            exc_info=True,
            **fields
        )

    # ---------- write side -------------------------------------------------

    async def create(self, item: T, *, timeout: Optional[float] = None) -> T:
        """
        Insert a new entity.

        Args:
            item: Entity to store (id may be preset or left None)
            timeout: Optional deadline in seconds forwarded to the store

        Returns:
            New entity instance with the generated identity populated

        Raises:
            DuplicateKeyError: If the identity or a unique index collides
            StoreWriteError: If the insert fails
        """
        started = time.perf_counter()
        try:
            inserted_id = await self.collection.insert_one(item.to_document(), timeout=timeout)
        except StoreError as e:
            self._log_failure("create", e)
            raise

        created = item.model_copy(update={"id": str(inserted_id)})
        self._log("create", started, entity_id=created.id)
        return created

    async def update(
        self,
        id: str,
        item: Union[Mapping[str, Any], BaseModel],
        *,
        timeout: Optional[float] = None
    ) -> Optional[T]:
        """
        Apply a partial update to the entity with this identity.

        Args:
            id: Entity identity
            item: Fields to set; for a model only explicitly set fields are
                used. The identity itself is never overwritten.
            timeout: Optional deadline in seconds forwarded to the store

        Returns:
            Updated entity, or None if no record has this identity

        Raises:
            StoreWriteError: If the update fails
            StoreReadError: If the field set is empty and the lookup fails

        Note:
            An empty field set performs no write and returns the current
            record. Both paths are logged as operation "update".
        """
        if isinstance(item, BaseModel):
            fields = item.model_dump(exclude_unset=True, by_alias=True)
        else:
            fields = dict(item)
        fields.pop("id", None)
        fields.pop(ID_FIELD, None)

        started = time.perf_counter()
        try:
            if fields:
                document = await self.collection.update_by_id(
                    to_store_id(id), fields, timeout=timeout
                )
            else:
                document = await self.collection.find_by_id(
                    to_store_id(id), timeout=timeout
                )
        except StoreError as e:
            self._log_failure("update", e, entity_id=id)
            raise

        self._log("update", started, entity_id=id, count=0 if document is None else 1)
        return self._to_entity(document)

    async def delete(self, id: str, *, timeout: Optional[float] = None) -> bool:
        """
        Delete the entity with this identity.

        Args:
            id: Entity identity
            timeout: Optional deadline in seconds forwarded to the store

        Returns:
            True if a record was removed, False if none matched

        Raises:
            StoreWriteError: If the delete fails
        """
        started = time.perf_counter()
        try:
            deleted = await self.collection.delete_one(
                {ID_FIELD: to_store_id(id)}, timeout=timeout
            )
        except StoreError as e:
            self._log_failure("delete", e, entity_id=id)
            raise

        self._log("delete", started, entity_id=id, count=deleted)
        return deleted > 0

    # ---------- read side --------------------------------------------------

    async def get(self, id: str, *, timeout: Optional[float] = None) -> Optional[T]:
        """
        Fetch an entity by identity.

        Returns:
            Entity, or None if not found

        Raises:
            StoreReadError: If the query fails
        """
        started = time.perf_counter()
        try:
            document = await self.collection.find_by_id(to_store_id(id), timeout=timeout)
        except StoreError as e:
            self._log_failure("get", e, entity_id=id)
            raise

        self._log("get", started, entity_id=id, count=0 if document is None else 1)
        return self._to_entity(document)

    async def find_one(
        self,
        filter: Mapping[str, Any],
        *,
        timeout: Optional[float] = None
    ) -> Optional[T]:
        """
        Fetch the first entity matching a filter.

        Args:
            filter: Store filter, passed through verbatim

        Returns:
            Entity, or None if nothing matches

        Raises:
            StoreReadError: If the query fails
        """
        started = time.perf_counter()
        try:
            document = await self.collection.find_one(filter, timeout=timeout)
        except StoreError as e:
            self._log_failure("find_one", e)
            raise

        self._log("find_one", started, count=0 if document is None else 1)
        return self._to_entity(document)

    async def find(
        self,
        filter: Optional[Mapping[str, Any]] = None,
        sort: SortArg = None,
        *,
        timeout: Optional[float] = None
    ) -> List[T]:
        """
        Fetch all entities matching a filter.

        Args:
            filter: Store filter, passed through verbatim (default: all)
            sort: Optional sort ("field:-1" string or SortSpec)

        Returns:
            List of entities; empty when nothing matches

        Raises:
            StoreReadError: If the query fails
        """
        started = time.perf_counter()
        sort_spec = SortSpec.parse(sort)
        try:
            documents = await self.collection.find_many(
                filter or {},
                sort=sort_spec.keys or None,
                timeout=timeout,
            )
        except StoreError as e:
            self._log_failure("find", e)
            raise

        self._log("find", started, count=len(documents))
        return [self.model_cls.from_document(doc) for doc in documents]

    async def count(
        self,
        filter: Optional[Mapping[str, Any]] = None,
        *,
        timeout: Optional[float] = None
    ) -> int:
        """
        Count entities matching a filter.

        Raises:
            StoreReadError: If the count fails
        """
        started = time.perf_counter()
        try:
            total = await self.collection.count(filter or {}, timeout=timeout)
        except StoreError as e:
            self._log_failure("count", e)
            raise

        self._log("count", started, count=total)
        return total

    async def get_all(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        search: Optional[Mapping[str, Any]] = None,
        sort: SortArg = None,
        select: SelectArg = None,
        *,
        timeout: Optional[float] = None
    ) -> Tuple[List[T], Pagination]:
        """
        List entities one page at a time.

        Args:
            page: Page number, 1-indexed. page <= 0 disables windowing:
                every matching record is returned with an empty Pagination.
            page_size: Records per page (default: settings.default_page_size)
            search: Store filter, passed through verbatim (default: all)
            sort: Sort string or SortSpec (default: settings.default_sort,
                identity descending)
            select: Comma separated field names or Projection to restrict
                the returned fields (default: all fields)
            timeout: Optional deadline in seconds forwarded to each store call

        Returns:
            Tuple of (records, pagination)

        Raises:
            ValueError: If page > 0 and page_size < 1
            StoreReadError: If the count or the listing query fails

        Example:
            >>> records, pagination = await repo.get_all(page=3, page_size=10)
            >>> pagination.to_response()
            {'page': 3, 'pageSize': 10, 'total': 25, 'totalPages': 3}
        """
        started = time.perf_counter()
        if page_size is None:
            page_size = settings.default_page_size
        search = search or {}
        sort_spec = SortSpec.parse(sort if sort is not None else settings.default_sort)
        projection = Projection.parse(select)

        skip = (page - 1) * page_size
        limit = 0
        pagination = Pagination()

        try:
            if page > 0:
                if page_size < 1:
                    raise ValueError(f"page_size must be >= 1, got {page_size}")
                total = await self.collection.count(search, timeout=timeout)
                pagination = self.paginate(page, page_size, total)
                limit = page_size
            else:
                skip = 0

            documents = await self.collection.find_many(
                search,
                projection=projection.to_mongo() or None,
                sort=sort_spec.keys or None,
                skip=skip,
                limit=limit,
                timeout=timeout,
            )
        except StoreError as e:
            self._log_failure("get_all", e, page=page)
            raise

        if projection:
            records = [self.model_cls.from_partial_document(doc) for doc in documents]
        else:
            records = [self.model_cls.from_document(doc) for doc in documents]

        self._log("get_all", started, page=page, count=len(records), total=pagination.total)
        return records, pagination

    def paginate(self, page: int, page_size: int, total: int) -> Pagination:
        """
        Compute pagination metadata for a listing.

        Override to customize metadata for an entity type.
        """
        return paginate(page, page_size, total)
