"""Exception hierarchy raised by Stash components."""

from __future__ import annotations

from typing import ClassVar, Mapping

from . import codes
from .types import ErrorCategory


class StashError(Exception):
    """Base error type for domain failures raised by Stash components."""

    category: ClassVar[ErrorCategory] = ErrorCategory.INTERNAL
    code: ClassVar[str] = codes.INTERNAL_ERROR

    def __init__(self, message: str, *, metadata: Mapping[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.metadata: dict[str, str] = dict(metadata or {})

    def __str__(self) -> str:
        """Return human-readable error message."""
        return self.message


class StashValidationError(StashError):
    """Caller input failed validation."""

    category = ErrorCategory.VALIDATION
    code = codes.INVALID_ARGUMENT


class ConflictError(StashError):
    """Operation would violate a uniqueness constraint."""

    category = ErrorCategory.CONFLICT
    code = codes.CONFLICT


class NotFoundError(StashError):
    """Referenced resource does not exist."""

    category = ErrorCategory.NOT_FOUND
    code = codes.RESOURCE_NOT_FOUND
