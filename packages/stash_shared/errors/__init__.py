"""Public shared error API for Stash components."""

from . import codes
from .exceptions import ConflictError, NotFoundError, StashError, StashValidationError
from .normalize import exception_to_error, is_database_error
from .types import ErrorCategory, ErrorDetail

__all__ = [
    "ConflictError",
    "ErrorCategory",
    "ErrorDetail",
    "NotFoundError",
    "StashError",
    "StashValidationError",
    "codes",
    "exception_to_error",
    "is_database_error",
]
