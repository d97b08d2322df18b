"""Exception normalization utilities for shared error contracts."""

from __future__ import annotations

from . import codes
from .exceptions import StashError
from .types import ErrorCategory, ErrorDetail


def exception_to_error(exc: Exception) -> ErrorDetail:
    """Normalize a Python exception into a shared ``ErrorDetail``.

    Domain errors keep their own category and code. Filesystem and database
    failures map to dependency errors; anything else is internal.
    """
    metadata = {"exception_type": type(exc).__name__}

    if isinstance(exc, StashError):
        return ErrorDetail(
            code=exc.code,
            message=exc.message,
            category=exc.category,
            metadata={**metadata, **exc.metadata},
        )
    if is_database_error(exc):
        return ErrorDetail(
            code=codes.DATABASE_FAILURE,
            message="metadata store request failed",
            category=ErrorCategory.DEPENDENCY,
            metadata=metadata,
        )
    if isinstance(exc, OSError):
        return ErrorDetail(
            code=codes.FILESYSTEM_FAILURE,
            message=str(exc) or "filesystem operation failed",
            category=ErrorCategory.DEPENDENCY,
            metadata=metadata,
        )
    if isinstance(exc, ValueError):
        return ErrorDetail(
            code=codes.INVALID_ARGUMENT,
            message=str(exc),
            category=ErrorCategory.VALIDATION,
            metadata=metadata,
        )
    return ErrorDetail(
        code=codes.UNEXPECTED_EXCEPTION,
        message=str(exc) or "unexpected exception",
        category=ErrorCategory.INTERNAL,
        metadata=metadata,
    )


def is_database_error(exc: BaseException) -> bool:
    """Return whether one exception appears to originate from the SQL stack."""
    module = type(exc).__module__
    return module.startswith("sqlalchemy") or module.startswith("sqlite3")
