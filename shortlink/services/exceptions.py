"""Exceptions for the shortlink service layer.

Each service error carries an ErrorKind, and each kind carries the HTTP
status the API layer answers with. The exception handler in
``shortlink.main`` switches on the kind only.
"""

from enum import Enum


class ErrorKind(Enum):
    VALIDATION = ("validation", 400)
    CONFLICT = ("conflict", 409)
    NOT_FOUND = ("not_found", 404)
    STORE = ("store", 500)

    def __init__(self, code: str, status_code: int):
        self.code = code
        self.status_code = status_code


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    kind: ErrorKind = ErrorKind.STORE

    @property
    def status_code(self) -> int:
        return self.kind.status_code


class ValidationError(ServiceError):
    """The url or slug of a create request is malformed."""
    kind = ErrorKind.VALIDATION


class ConflictError(ServiceError):
    """The requested slug is already in use."""
    kind = ErrorKind.CONFLICT


class NotFoundError(ServiceError):
    """No mapping exists for a slug."""
    kind = ErrorKind.NOT_FOUND


class StoreError(ServiceError):
    """Any other failure of the mapping store."""
    kind = ErrorKind.STORE
