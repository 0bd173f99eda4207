"""Repository layer for the shortlink application.

This module provides repository classes that abstract database operations
and implement the Repository pattern for clean separation of concerns.
"""

from shortlink.repositories.base import (
    BaseRepository,
    RepositoryError,
    DuplicateEntityError
)
from shortlink.repositories.mapping_repository import MappingRepository

__all__ = [
    # Base classes and exceptions
    "BaseRepository",
    "RepositoryError",
    "DuplicateEntityError",

    # Concrete repositories
    "MappingRepository",
]
