"""Protocol interfaces used by Storage Unit Service."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from services.state.storage_units.domain import StorageUnit, StorageUnitKind


class StorageUnitRepository(Protocol):
    """Persistent storage for owner records."""

    def insert_unit(self, *, unit: StorageUnit) -> StorageUnit:
        """Insert one unit and return it with its assigned ``id``."""

    def get_unit(self, *, unit_id: int) -> StorageUnit | None:
        """Read one unit by id."""

    def find_unit(
        self, *, kind: StorageUnitKind, identifier: str
    ) -> StorageUnit | None:
        """Read the unit registered under one kind and identifier."""

    def list_units(self, *, kind: StorageUnitKind | None = None) -> list[StorageUnit]:
        """Return units ordered by id, optionally filtered by kind."""

    def replace_file_references(
        self, *, unit_id: int, file_references: Sequence[str]
    ) -> StorageUnit | None:
        """Replace one unit's file references and return the updated record.

        The new list is validated first; an invalid list raises ``ValueError``
        and leaves the stored record untouched.
        """

    def delete_unit(self, *, unit_id: int) -> bool:
        """Delete one unit and return whether it existed."""

    def delete_all_units(self) -> int:
        """Delete every unit and return how many were removed."""
