"""Service layer for the shortlink application.

Services hold the business logic and orchestrate the repositories.
"""

from shortlink.services.shortener import MappingService

__all__ = ["MappingService"]
