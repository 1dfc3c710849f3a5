"""
Base model for document entities.

Provides the pydantic base class every entity stored through a repository
derives from, plus helpers for moving identities between their string form
and the form stored in `_id`.
"""

from typing import Any, Mapping, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict


ID_FIELD = "_id"


def to_store_id(entity_id: Any) -> Any:
    """
    Convert an opaque identity to the value stored in `_id`.

    Strings that are valid ObjectIds become ObjectId instances; anything
    else (caller-assigned string ids, ints) is used verbatim.

    Example:
        >>> to_store_id("65f0c0ffee0000000000abcd")
        ObjectId('65f0c0ffee0000000000abcd')
        >>> to_store_id("user-42")
        'user-42'
    """
    if isinstance(entity_id, str) and ObjectId.is_valid(entity_id):
        return ObjectId(entity_id)
    return entity_id


def from_store_id(value: Any) -> Optional[str]:
    """Convert a stored `_id` back to its opaque string form."""
    if value is None:
        return None
    return str(value)


class DocumentModel(BaseModel):
    """
    Base class for entities persisted as documents.

    The identity lives in `id` on the model and in `_id` in the store.
    Subclasses declare their own fields; the repository treats everything
    beyond the identity as opaque. Fields declared with an alias are stored
    under the alias and may be set by either name.

    Attributes:
        id: Opaque string identity (None until the record is stored)

    Example:
        >>> class User(DocumentModel):
        ...     name: str
        ...     email: str
        >>> User(name="Ada", email="ada@example.com").to_document()
        {'name': 'Ada', 'email': 'ada@example.com'}
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None

    def to_document(self) -> dict[str, Any]:
        """
        Convert the model to a storable document.

        Returns:
            Dictionary keyed by field alias, with `id` moved to `_id`
            (omitted when unset)
        """
        document = self.model_dump(exclude={"id"}, by_alias=True)
        if self.id is not None:
            document[ID_FIELD] = to_store_id(self.id)
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]):
        """
        Build a validated model from a stored document.

        Args:
            document: Raw document as returned by the store

        Returns:
            Model instance with `_id` mapped to a string `id`
        """
        return cls.model_validate(cls._normalize(document))

    @classmethod
    def from_partial_document(cls, document: Mapping[str, Any]):
        """
        Build a model from a projected document without validation.

        Projections may omit required fields, so the instance is assembled
        with model_construct; missing fields take their defaults.
        """
        return cls.model_construct(**cls._normalize(document))

    @classmethod
    def _normalize(cls, document: Mapping[str, Any]) -> dict[str, Any]:
        data = dict(document)
        if ID_FIELD in data:
            data["id"] = from_store_id(data.pop(ID_FIELD))
        return data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r})"
