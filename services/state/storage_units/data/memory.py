"""In-process storage unit repository for tests."""

from __future__ import annotations

from collections.abc import Sequence

from packages.stash_shared.errors import ConflictError
from services.state.storage_units.domain import StorageUnit, StorageUnitKind
from services.state.storage_units.interfaces import StorageUnitRepository


class InMemoryStorageUnitRepository(StorageUnitRepository):
    """Dict-backed repository with the same contract as the SQL backend."""

    def __init__(self) -> None:
        self.rows: dict[int, StorageUnit] = {}
        self._next_id = 1

    def insert_unit(self, *, unit: StorageUnit) -> StorageUnit:
        if self.find_unit(kind=unit.kind, identifier=unit.identifier) is not None:
            raise ConflictError(
                f"{unit.kind.value} identifier already registered: {unit.identifier}"
            )
        stored = unit.model_copy(update={"id": self._next_id})
        self.rows[self._next_id] = stored
        self._next_id += 1
        return stored

    def get_unit(self, *, unit_id: int) -> StorageUnit | None:
        return self.rows.get(unit_id)

    def find_unit(
        self, *, kind: StorageUnitKind, identifier: str
    ) -> StorageUnit | None:
        for unit in self.rows.values():
            if unit.kind == kind and unit.identifier == identifier:
                return unit
        return None

    def list_units(self, *, kind: StorageUnitKind | None = None) -> list[StorageUnit]:
        return [
            unit
            for _, unit in sorted(self.rows.items())
            if kind is None or unit.kind == kind
        ]

    def replace_file_references(
        self, *, unit_id: int, file_references: Sequence[str]
    ) -> StorageUnit | None:
        unit = self.rows.get(unit_id)
        if unit is None:
            return None
        updated = unit.with_file_references(file_references)
        self.rows[unit_id] = updated
        return updated

    def delete_unit(self, *, unit_id: int) -> bool:
        return self.rows.pop(unit_id, None) is not None

    def delete_all_units(self) -> int:
        removed = len(self.rows)
        self.rows.clear()
        return removed
