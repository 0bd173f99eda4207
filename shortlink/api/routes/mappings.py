"""Mapping creation endpoint."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.api import schemas
from shortlink.api.dependencies import get_mapping_service
from shortlink.db.session import get_db
from shortlink.services.shortener import MappingService

router = APIRouter(tags=["mappings"])


@router.post(
    "/url",
    response_model=schemas.MappingResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Invalid url or slug"},
        409: {"model": schemas.ErrorResponse, "description": "Slug already in use"},
        500: {"model": schemas.ErrorResponse, "description": "Store failure"},
    }
)
async def create_mapping(
    payload: schemas.MappingCreateRequest,
    db: AsyncSession = Depends(get_db),
    mapping_service: MappingService = Depends(get_mapping_service),
):
    """Create a mapping; service errors are rendered by the app's handler."""
    mapping = await mapping_service.create_mapping(
        db=db,
        url=payload.url,
        slug=payload.slug,
    )
    return schemas.MappingResponse.model_validate(mapping)
