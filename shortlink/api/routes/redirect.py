"""Slug resolution endpoint."""

from urllib.parse import urlencode

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import RedirectResponse

from shortlink.api.dependencies import get_mapping_service
from shortlink.db.session import get_db
from shortlink.services.exceptions import ErrorKind, NotFoundError, ServiceError
from shortlink.services.shortener import MappingService

router = APIRouter(tags=["redirect"])

SERVER_ERROR = "Server error"


def error_redirect(message: str, status_code: int) -> RedirectResponse:
    """Send the client back to the landing page with an ``error`` query."""
    return RedirectResponse(url=f"/?{urlencode({'error': message})}", status_code=status_code)


@router.get(
    "/{slug}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
)
async def redirect_to_url(
    slug: str,
    db: AsyncSession = Depends(get_db),
    mapping_service: MappingService = Depends(get_mapping_service),
):
    """Redirect to the URL stored for ``slug``."""
    try:
        target = await mapping_service.resolve(db, slug)
        if target is None:
            raise NotFoundError(f"{slug} not found")
    except ServiceError as e:
        if e.kind is ErrorKind.NOT_FOUND:
            logger.debug(str(e))
            return error_redirect(str(e), e.status_code)
        logger.opt(exception=e).error("Error resolving slug", slug=slug)
        return error_redirect(SERVER_ERROR, e.status_code)

    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)
