"""Document store backends (ABC + implementations)"""

from docdao.stores.interfaces import IDocumentCollection
from docdao.stores.memory import InMemoryCollection
from docdao.stores.mongo import MongoCollection

__all__ = [
    'IDocumentCollection',
    'InMemoryCollection',
    'MongoCollection',
]
