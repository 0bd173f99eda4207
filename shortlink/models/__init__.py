"""
Data models for the shortlink application.

This module imports and exports all SQLModel models used in the application.
"""

# First import SQLModel itself to ensure metadata is initialized
from sqlmodel import SQLModel

from shortlink.models.mapping import Mapping, MappingBase, MappingCreate

__all__ = [
    "SQLModel",
    "Mapping",
    "MappingBase",
    "MappingCreate",
]
