"""Mapping repository for the shortlink application.

This module provides the MappingRepository class, the mapping store: an
insert guarded by the unique slug index and a point lookup by slug.
"""

from typing import Any, Dict, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from shortlink.models.mapping import Mapping, MappingCreate
from shortlink.repositories.base import BaseRepository, RepositoryError


class MappingRepository(BaseRepository[Mapping, MappingCreate]):
    """
    Repository for Mapping model database operations.

    The uniqueness of ``slug`` is enforced by the database index only;
    this class never checks-then-inserts on its own.
    """

    unique_fields = ("slug",)

    def __init__(self):
        """Initialize the repository with the Mapping model type."""
        super().__init__(Mapping)

    async def insert(
        self,
        db: AsyncSession,
        data: Union[MappingCreate, Dict[str, Any]]
    ) -> Mapping:
        """
        Insert a new mapping.

        Args:
            db: Database session
            data: Mapping data (either as a MappingCreate model or dictionary)

        Returns:
            The inserted Mapping with its store-assigned id

        Raises:
            DuplicateEntityError: If the slug is already taken
            RepositoryError: On other database errors
        """
        return await self.create(db, data)

    async def find_by_slug(self, db: AsyncSession, slug: str) -> Optional[Mapping]:
        """
        Find a mapping by its slug.

        The comparison is exact; stored slugs are already lowercase.

        Args:
            db: Database session
            slug: The slug to look up

        Returns:
            The Mapping if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = select(self.model_type).where(self.model_type.slug == slug)
            result = await db.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving mapping by slug: {e}") from e
