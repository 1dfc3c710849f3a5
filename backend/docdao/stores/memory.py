"""
In-memory collection backend.

Dictionary-backed IDocumentCollection implementing the subset of MongoDB
query semantics the repositories rely on. Used by the test suite and for
local development without a running server.

Supported filter syntax:
- Field equality, including dotted paths and scalar-in-array matches
- Comparison operators: $eq, $ne, $gt, $gte, $lt, $lte, $in, $nin, $exists
- Logical operators at the top level: $and, $or, $nor
"""

import asyncio
import copy
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from bson import ObjectId

from docdao.core.exceptions import DuplicateKeyError, StoreReadError
from docdao.models.base import ID_FIELD
from docdao.stores.interfaces import Document, Filter, IDocumentCollection, SortKeys


_MISSING = object()


def _resolve(document: Mapping[str, Any], path: str) -> Any:
    """Follow a dotted path through nested mappings; _MISSING when absent."""
    value: Any = document
    for part in path.split("."):
        if isinstance(value, Mapping) and part in value:
            value = value[part]
        else:
            return _MISSING
    return value


def _candidates(value: Any) -> List[Any]:
    """Values a condition is tested against: the value and, for lists, its items."""
    if isinstance(value, list):
        return [value, *value]
    return [value]


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def check(value: Any, operand: Any) -> bool:
        if value is _MISSING:
            return False
        for candidate in _candidates(value):
            try:
                if op(candidate, operand):
                    return True
            except TypeError:
                continue
        return False
    return check


def _equals(value: Any, operand: Any) -> bool:
    if value is _MISSING:
        return operand is None
    return any(candidate == operand for candidate in _candidates(value))


def _in(value: Any, operand: Any) -> bool:
    return any(_equals(value, item) for item in operand)


_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "$eq": _equals,
    "$ne": lambda value, operand: not _equals(value, operand),
    "$gt": _compare(lambda a, b: a > b),
    "$gte": _compare(lambda a, b: a >= b),
    "$lt": _compare(lambda a, b: a < b),
    "$lte": _compare(lambda a, b: a <= b),
    "$in": _in,
    "$nin": lambda value, operand: not _in(value, operand),
    "$exists": lambda value, operand: (value is not _MISSING) == bool(operand),
}


def _is_operator_expression(condition: Any) -> bool:
    return (
        isinstance(condition, Mapping)
        and bool(condition)
        and all(str(key).startswith("$") for key in condition)
    )


def matches(document: Mapping[str, Any], filter: Filter) -> bool:
    """
    Check whether a document satisfies a filter.

    Raises:
        StoreReadError: If the filter uses an unsupported operator
    """
    for key, condition in filter.items():
        if key == "$and":
            if not all(matches(document, sub) for sub in condition):
                return False
        elif key == "$or":
            if not any(matches(document, sub) for sub in condition):
                return False
        elif key == "$nor":
            if any(matches(document, sub) for sub in condition):
                return False
        elif key.startswith("$"):
            raise StoreReadError(f"Unsupported top-level operator: {key}")
        else:
            value = _resolve(document, key)
            if _is_operator_expression(condition):
                for op, operand in condition.items():
                    check = _OPERATORS.get(op)
                    if check is None:
                        raise StoreReadError(f"Unsupported operator: {op}")
                    if not check(value, operand):
                        return False
            elif not _equals(value, condition):
                return False
    return True


def _project(document: Document, projection: Optional[Mapping[str, int]]) -> Document:
    """Apply an inclusion projection; `_id` is kept unless excluded."""
    if not projection:
        return copy.deepcopy(document)

    included = [field for field, flag in projection.items() if flag and field != ID_FIELD]
    projected: Document = {}
    if projection.get(ID_FIELD, 1) and ID_FIELD in document:
        projected[ID_FIELD] = copy.deepcopy(document[ID_FIELD])
    for field in included:
        value = _resolve(document, field)
        if value is _MISSING:
            continue
        target = projected
        parts = field.split(".")
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = copy.deepcopy(value)
    return projected


def _sort_key(document: Document, field: str):
    # Ranks follow the BSON comparison order: null, numbers, strings,
    # objects, arrays, binary, ObjectId, booleans, dates
    value = _resolve(document, field)
    if value is _MISSING or value is None:
        return (0, "")
    if isinstance(value, bool):
        return (7, value)
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, Mapping):
        return (3, str(value))
    if isinstance(value, list):
        return (4, str(value))
    if isinstance(value, bytes):
        return (5, value)
    if isinstance(value, ObjectId):
        return (6, value)
    if isinstance(value, datetime):
        return (8, value.timestamp())
    return (9, str(value))


def _sorted(documents: List[Document], sort: Optional[SortKeys]) -> List[Document]:
    if not sort:
        return documents
    result = list(documents)
    # Stable sorts applied from the least significant key outwards
    for field, direction in reversed(list(sort)):
        result.sort(key=lambda doc: _sort_key(doc, field), reverse=direction < 0)
    return result


class InMemoryCollection(IDocumentCollection):
    """
    IDocumentCollection holding documents in a dict keyed by `_id`.

    Insertion order is preserved for unsorted queries. Documents are deep
    copied on the way in and out so callers cannot mutate stored state.
    The `timeout` argument is accepted and ignored.

    Attributes:
        documents: Stored documents keyed by identity
    """

    def __init__(self, name: str = "memory"):
        self._name = name
        self.documents: Dict[Any, Document] = {}
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    def _matching(self, filter: Filter) -> List[Document]:
        return [doc for doc in self.documents.values() if matches(doc, filter)]

    async def insert_one(
        self,
        document: Document,
        timeout: Optional[float] = None
    ) -> Any:
        async with self._lock:
            stored = copy.deepcopy(dict(document))
            stored.setdefault(ID_FIELD, ObjectId())
            entity_id = stored[ID_FIELD]
            if entity_id in self.documents:
                raise DuplicateKeyError(
                    f"insert_one on '{self.name}' violated a unique index: "
                    f"duplicate _id {entity_id!r}",
                    collection=self.name,
                    operation="insert_one",
                )
            self.documents[entity_id] = stored
            return entity_id

    async def find_by_id(
        self,
        entity_id: Any,
        projection: Optional[Mapping[str, int]] = None,
        timeout: Optional[float] = None
    ) -> Optional[Document]:
        async with self._lock:
            document = self.documents.get(entity_id)
            if document is None:
                return None
            return _project(document, projection)

    async def find_one(
        self,
        filter: Filter,
        projection: Optional[Mapping[str, int]] = None,
        timeout: Optional[float] = None
    ) -> Optional[Document]:
        async with self._lock:
            for document in self.documents.values():
                if matches(document, filter):
                    return _project(document, projection)
            return None

    async def find_many(
        self,
        filter: Filter,
        projection: Optional[Mapping[str, int]] = None,
        sort: Optional[SortKeys] = None,
        skip: int = 0,
        limit: int = 0,
        timeout: Optional[float] = None
    ) -> List[Document]:
        async with self._lock:
            documents = _sorted(self._matching(filter), sort)
            if skip:
                documents = documents[skip:]
            if limit:
                documents = documents[:limit]
            return [_project(doc, projection) for doc in documents]

    async def update_by_id(
        self,
        entity_id: Any,
        fields: Mapping[str, Any],
        timeout: Optional[float] = None
    ) -> Optional[Document]:
        async with self._lock:
            document = self.documents.get(entity_id)
            if document is None:
                return None
            for path, value in fields.items():
                target = document
                parts = path.split(".")
                for part in parts[:-1]:
                    target = target.setdefault(part, {})
                target[parts[-1]] = copy.deepcopy(value)
            return copy.deepcopy(document)

    async def delete_one(
        self,
        filter: Filter,
        timeout: Optional[float] = None
    ) -> int:
        async with self._lock:
            for entity_id, document in self.documents.items():
                if matches(document, filter):
                    del self.documents[entity_id]
                    return 1
            return 0

    async def count(
        self,
        filter: Filter,
        timeout: Optional[float] = None
    ) -> int:
        async with self._lock:
            return len(self._matching(filter))
