"""Link shortening service for the shortlink application.

This module contains the MappingService class which implements slug
allocation, validation and lookup on top of the mapping store.
"""

import logging
import re
from typing import Optional

from nanoid import generate
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.config import settings
from shortlink.db.session import db_transaction
from shortlink.models.mapping import Mapping, MappingCreate
from shortlink.repositories.base import DuplicateEntityError, RepositoryError
from shortlink.repositories.mapping_repository import MappingRepository
from shortlink.services.exceptions import ConflictError, StoreError, ValidationError

logger = logging.getLogger(__name__)

SLUG_IN_USE = "Slug in use"

# Absolute http(s)/ftp URL with a host, optional port, path, query and fragment
URL_PATTERN = re.compile(
    r"^(https?|ftp)://"
    r"(?:[^\s\x00-\x1f\x7f:@/]+(?::[^\s\x00-\x1f\x7f@/]*)?@)?"  # userinfo
    r"(?:localhost|(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?"
    r"|\d{1,3}(?:\.\d{1,3}){3})"
    r"(?::\d{1,5})?"
    r"(?:[/?#][^\s\x00-\x1f\x7f]*)?$",
    re.IGNORECASE,
)

SLUG_CHAR = r"[A-Za-z0-9_-]"
SLUG_FULL_PATTERN = re.compile(rf"^{SLUG_CHAR}+$")
SLUG_ANY_PATTERN = re.compile(SLUG_CHAR)


class MappingService:
    """
    Service for link shortening business logic.

    The service owns no connection state: the session and the repository
    are handed in, so tests can run it against any store.
    """

    def __init__(self, mapping_repository: MappingRepository):
        """
        Initialize the mapping service.

        Args:
            mapping_repository: Store used for lookups and inserts
        """
        self.mapping_repository = mapping_repository

    @db_transaction(db_param_name="db")
    async def create_mapping(
        self,
        db: AsyncSession,
        url: Optional[str],
        slug: Optional[str] = None,
    ) -> Mapping:
        """
        Create a mapping for ``url``, using ``slug`` if given or a random one.

        Args:
            db: Database session
            url: The target URL
            slug: Optional requested slug

        Returns:
            Mapping: The committed mapping, including its id

        Raises:
            ValidationError: If the url or slug is malformed
            ConflictError: If the slug is already in use
            StoreError: If the store fails for any other reason
        """
        url = self.clean_url(url)
        slug = self.clean_slug(slug)

        if slug is None:
            slug = self.generate_slug()
        else:
            # Best effort only, the unique index settles races below
            try:
                existing = await self.mapping_repository.find_by_slug(db, slug)
            except RepositoryError as e:
                logger.error(f"Error checking slug '{slug}': {e}")
                raise StoreError(str(e)) from e
            if existing is not None:
                raise ConflictError(SLUG_IN_USE)

        slug = slug.lower()

        try:
            mapping = await self.mapping_repository.insert(
                db, MappingCreate(slug=slug, url=url)
            )
        except DuplicateEntityError as e:
            raise ConflictError(SLUG_IN_USE) from e
        except RepositoryError as e:
            logger.error(f"Error inserting mapping '{slug}': {e}")
            raise StoreError(str(e)) from e

        logger.info(f"Created mapping {slug} -> {url}")
        return mapping

    async def resolve(self, db: AsyncSession, slug: str) -> Optional[str]:
        """
        Look up the redirect target for ``slug``.

        The slug is matched exactly as given; it is not lowercased.

        Args:
            db: Database session
            slug: Slug from the request path

        Returns:
            The target URL, or None if no mapping exists

        Raises:
            StoreError: If the lookup fails
        """
        try:
            mapping = await self.mapping_repository.find_by_slug(db, slug)
        except RepositoryError as e:
            logger.error(f"Error resolving slug '{slug}': {e}")
            raise StoreError(str(e)) from e

        if mapping is None:
            return None
        return mapping.url

    def generate_slug(self) -> str:
        return generate(settings.SLUG_ALPHABET, settings.SLUG_LENGTH)

    @staticmethod
    def clean_url(url: Optional[str]) -> str:
        """Strip ``url`` and check that it is an absolute URL."""
        if url is None or not str(url).strip():
            raise ValidationError("url is a required field")

        url = str(url).strip()
        if not URL_PATTERN.match(url):
            raise ValidationError("url must be a valid URL")
        return url

    @staticmethod
    def clean_slug(slug: Optional[str]) -> Optional[str]:
        """
        Strip ``slug`` and check its characters.

        Returns None when no slug was requested. With SLUG_STRICT_PATTERN
        off, a slug passes as soon as one character is allowed.
        """
        if slug is None:
            return None

        slug = str(slug).strip()
        if not slug:
            return None

        if len(slug) > settings.SLUG_MAX_LENGTH:
            raise ValidationError(
                f"slug must be at most {settings.SLUG_MAX_LENGTH} characters"
            )

        if settings.SLUG_STRICT_PATTERN:
            valid = SLUG_FULL_PATTERN.match(slug) is not None
        else:
            valid = SLUG_ANY_PATTERN.search(slug) is not None

        if not valid:
            raise ValidationError(
                "slug may only contain letters, numbers, underscores and hyphens"
            )
        return slug
