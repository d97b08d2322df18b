"""Domain errors raised by File Storage Service."""

from __future__ import annotations

from packages.stash_shared.errors import ConflictError, StashValidationError, codes


class DuplicateVirtualPathError(ConflictError):
    """Import attempted with a virtual path that is already mapped."""

    code = codes.ALREADY_EXISTS

    def __init__(self, virtual_path: str) -> None:
        super().__init__(
            f"virtual path already exists: {virtual_path}",
            metadata={"virtual_path": virtual_path},
        )
        self.virtual_path = virtual_path


class InvalidVirtualPathError(StashValidationError):
    """Virtual path failed validation."""


class InvalidExtensionError(StashValidationError):
    """Stored filename extension failed validation."""
