"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access repositories and service instances.
"""

from fastapi import Depends

from shortlink.repositories.mapping_repository import MappingRepository
from shortlink.services.shortener import MappingService


async def get_mapping_repository():
    """Get an instance of the mapping repository."""
    return MappingRepository()


async def get_mapping_service(
    mapping_repo: MappingRepository = Depends(get_mapping_repository),
) -> MappingService:
    """Get an instance of the mapping service."""
    return MappingService(mapping_repository=mapping_repo)
