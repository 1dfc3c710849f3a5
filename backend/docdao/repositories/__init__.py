"""
Repository layer for data access.

Provides data access abstractions following the Repository pattern,
isolating document store access from business logic.
"""

from docdao.repositories.base import BaseRepository

__all__ = ["BaseRepository"]
