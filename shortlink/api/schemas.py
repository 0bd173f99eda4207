"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class MappingCreateRequest(BaseModel):
    """Request schema for creating a mapping.

    Both fields are optional here so that missing or malformed values are
    reported by the service as validation errors.
    """
    url: Optional[str] = None
    slug: Optional[str] = None


class MappingResponse(BaseModel):
    """Response schema for a created mapping."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    url: str


class ErrorResponse(BaseModel):
    """Error body of the create endpoint."""
    message: str
    stack: str
