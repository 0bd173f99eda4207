"""Mapping data models.

This module defines the Mapping model, the only persisted entity: the
association between a slug and the URL it redirects to.
"""
from typing import Optional

from sqlmodel import Field, SQLModel


class MappingBase(SQLModel):
    """Base model for mapping data."""

    slug: str = Field(
        index=True,
        unique=True,  # ix_mappings_slug, the store's uniqueness guarantee
        description="Lowercase short identifier used in the redirect path",
    )
    url: str = Field(
        description="The target URL to redirect to"
    )


class Mapping(MappingBase, table=True):
    """
    Mapping model stored in the ``mappings`` table.

    Rows are written once by the create operation and never updated or
    deleted. The unique index on ``slug`` decides which of two concurrent
    inserts for the same slug wins.
    """

    __tablename__ = "mappings"

    id: Optional[int] = Field(default=None, primary_key=True)


class MappingCreate(MappingBase):
    """Schema for inserting a new mapping."""
    pass
