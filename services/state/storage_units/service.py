"""Authoritative in-process Python API for Storage Unit Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from packages.stash_shared.config import StashSettings
from services.state.file_storage.domain import ContentReference
from services.state.file_storage.service import FileStorageService
from services.state.storage_units.domain import StorageUnit, StorageUnitKind


class StorageUnitService(ABC):
    """Public API for owner records and the files they hold."""

    @abstractmethod
    def register(self, *, unit: StorageUnit) -> StorageUnit:
        """Validate and insert one unit; return it with its assigned id."""

    @abstractmethod
    def get_unit(self, *, unit_id: int) -> StorageUnit | None:
        """Return one unit by id."""

    @abstractmethod
    def add_file(
        self, *, unit_id: int, source_path: Path, suffix: str
    ) -> ContentReference:
        """Import one file under the unit and record its suffix."""

    @abstractmethod
    def resolve_file(self, *, unit_id: int, suffix: str) -> Path | None:
        """Resolve one file owned by a unit to its physical path."""

    @abstractmethod
    def delete_unit(self, *, unit_id: int) -> bool:
        """Delete every file owned by a unit, then the unit itself."""

    @abstractmethod
    def find_conflicting(
        self, *, kind: StorageUnitKind, identifier: str
    ) -> StorageUnit | None:
        """Return the registered unit that already uses one identifier."""

    @abstractmethod
    def list_units(self, *, kind: StorageUnitKind | None = None) -> list[StorageUnit]:
        """Return registered units, optionally for one kind."""

    @abstractmethod
    def clear(self) -> int:
        """Delete every unit record; return how many were removed."""


def build_storage_unit_service(
    *,
    settings: StashSettings,
    files: FileStorageService | None = None,
) -> StorageUnitService:
    """Build default Storage Unit implementation from typed settings."""
    from services.state.file_storage.service import build_file_storage_service
    from services.state.storage_units.data import (
        SqlStorageUnitRepository,
        StorageUnitSqlRuntime,
    )
    from services.state.storage_units.implementation import (
        DefaultStorageUnitService,
    )

    runtime = StorageUnitSqlRuntime.from_settings(settings)
    return DefaultStorageUnitService(
        repository=SqlStorageUnitRepository(runtime.sessions),
        files=files or build_file_storage_service(settings=settings),
    )
