"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from shortlink.api.routes import mappings, redirect, health
from shortlink.core.config import settings

# Create root router
api_router = APIRouter()

# Creation endpoint lives at /url, as clients of the service expect
api_router.include_router(mappings.router)

# Include health check routes with API prefix
api_router.include_router(
    health.router,
    prefix=settings.API_PREFIX
)

# Redirect routes go last: /{slug} matches any single path segment
api_router.include_router(redirect.router)

__all__ = ["api_router"]
