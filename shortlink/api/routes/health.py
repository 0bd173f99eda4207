"""Health check endpoints for monitoring application status."""

import time

from fastapi import APIRouter, status
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.config import settings
from shortlink.db.base import DatabaseHealthCheck
from shortlink.db.session import db_dependency
from shortlink.repositories.mapping_repository import MappingRepository
from shortlink.repositories.base import RepositoryError

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Get system health status",
    response_description="Health status of all system components"
)
async def health_check(db: AsyncSession = db_dependency):
    """Check health of the store connection."""
    database = await DatabaseHealthCheck.check_connection(db)
    health_status = {
        "status": "healthy" if database["status"] == "healthy" else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "timestamp": time.time(),
        "components": {"database": database},
    }

    if database["status"] == "healthy":
        try:
            health_status["mappings"] = await MappingRepository().count(db)
        except RepositoryError as e:
            health_status["status"] = "degraded"
            database["error"] = str(e)

    return health_status


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness probe",
    response_description="Application readiness status"
)
async def readiness_probe(db: AsyncSession = db_dependency):
    """Check if application is ready to handle requests."""
    database = await DatabaseHealthCheck.check_connection(db)
    components_status = {"api": True, "database": database["status"] == "healthy"}

    return {
        "ready": all(components_status.values()),
        "components": components_status
    }


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    response_description="Application liveness status"
)
async def liveness_probe():
    """Simple check that application is running."""
    return {"alive": True}
