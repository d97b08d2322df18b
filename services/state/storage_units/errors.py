"""Domain errors raised by Storage Unit Service."""

from __future__ import annotations

from packages.stash_shared.errors import StashValidationError


class StorageUnitValidationError(StashValidationError):
    """Storage unit failed the rule for its kind."""
