"""SQL repository for Storage Unit Service owner records."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from packages.stash_shared.errors import ConflictError
from resources.substrates.sql import SessionProvider
from services.state.storage_units.domain import StorageUnit, StorageUnitKind
from services.state.storage_units.interfaces import StorageUnitRepository

from .schema import storage_units


class SqlStorageUnitRepository(StorageUnitRepository):
    """SQL repository over the ``storage_units`` table."""

    def __init__(self, sessions: SessionProvider) -> None:
        self._sessions = sessions

    def insert_unit(self, *, unit: StorageUnit) -> StorageUnit:
        """Insert one unit row; map the kind/identifier constraint to conflict."""
        values = unit.model_dump(exclude={"id"}, mode="python")
        values["kind"] = unit.kind.value
        values["file_references"] = list(unit.file_references)
        try:
            with self._sessions.session() as session:
                result = session.execute(insert(storage_units).values(**values))
                unit_id = int(result.inserted_primary_key[0])
        except IntegrityError as exc:
            raise ConflictError(
                f"{unit.kind.value} identifier already registered: {unit.identifier}",
                metadata={"kind": unit.kind.value, "identifier": unit.identifier},
            ) from exc
        return unit.model_copy(update={"id": unit_id})

    def get_unit(self, *, unit_id: int) -> StorageUnit | None:
        return self._one(storage_units.c.id == unit_id)

    def find_unit(
        self, *, kind: StorageUnitKind, identifier: str
    ) -> StorageUnit | None:
        return self._one(
            (storage_units.c.kind == kind.value)
            & (storage_units.c.identifier == identifier)
        )

    def list_units(self, *, kind: StorageUnitKind | None = None) -> list[StorageUnit]:
        statement = select(storage_units).order_by(storage_units.c.id)
        if kind is not None:
            statement = statement.where(storage_units.c.kind == kind.value)
        with self._sessions.session() as session:
            rows = session.execute(statement).mappings().all()
            return [_to_unit(row) for row in rows]

    def replace_file_references(
        self, *, unit_id: int, file_references: Sequence[str]
    ) -> StorageUnit | None:
        current = self.get_unit(unit_id=unit_id)
        if current is None:
            return None
        updated = current.with_file_references(file_references)
        with self._sessions.session() as session:
            session.execute(
                update(storage_units)
                .where(storage_units.c.id == unit_id)
                .values(file_references=list(updated.file_references))
            )
        return updated

    def delete_unit(self, *, unit_id: int) -> bool:
        with self._sessions.session() as session:
            result = session.execute(
                delete(storage_units).where(storage_units.c.id == unit_id)
            )
            return int(result.rowcount or 0) > 0

    def delete_all_units(self) -> int:
        with self._sessions.session() as session:
            result = session.execute(delete(storage_units))
            return int(result.rowcount or 0)

    def _one(self, condition: Any) -> StorageUnit | None:
        with self._sessions.session() as session:
            row = (
                session.execute(select(storage_units).where(condition))
                .mappings()
                .one_or_none()
            )
            return None if row is None else _to_unit(row)


def _to_unit(row: Mapping[str, Any]) -> StorageUnit:
    """Map one SQL row to an immutable storage unit."""
    added_at: datetime = row["added_at"]
    if added_at.tzinfo is None:
        added_at = added_at.replace(tzinfo=UTC)
    return StorageUnit(
        id=int(row["id"]),
        kind=StorageUnitKind(row["kind"]),
        identifier=str(row["identifier"]),
        version=int(row["version"]),
        file_references=tuple(row["file_references"]),
        added_at=added_at,
        is_default_asset=bool(row["is_default_asset"]),
    )
