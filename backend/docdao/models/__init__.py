"""Entity base model and identity helpers."""

from docdao.models.base import DocumentModel, from_store_id, to_store_id

__all__ = [
    "DocumentModel",
    "to_store_id",
    "from_store_id",
]
