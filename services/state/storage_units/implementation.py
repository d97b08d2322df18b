"""Concrete Storage Unit Service implementation."""

from __future__ import annotations

from pathlib import Path
from threading import RLock

from packages.stash_shared.errors import ConflictError, NotFoundError
from packages.stash_shared.logging import fields, get_logger, public_api_logged
from packages.stash_shared.path_validation import normalize_virtual_path
from services.state.file_storage.domain import ContentReference
from services.state.file_storage.service import FileStorageService
from services.state.storage_units.domain import StorageUnit, StorageUnitKind
from services.state.storage_units.errors import StorageUnitValidationError
from services.state.storage_units.interfaces import StorageUnitRepository
from services.state.storage_units.service import StorageUnitService
from services.state.storage_units.validation import validate_unit

_LOGGER = get_logger(__name__)

SERVICE_COMPONENT_ID = "service_storage_units"


class DefaultStorageUnitService(StorageUnitService):
    """Default implementation delegating file handling to File Storage Service."""

    def __init__(
        self,
        *,
        repository: StorageUnitRepository,
        files: FileStorageService,
    ) -> None:
        self._repository = repository
        self._files = files
        self._lock = RLock()

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def register(self, *, unit: StorageUnit) -> StorageUnit:
        """Validate one unit against its kind rule and insert it."""
        validate_unit(unit)
        with self._lock:
            existing = self.find_conflicting(kind=unit.kind, identifier=unit.identifier)
            if existing is not None:
                raise ConflictError(
                    f"{unit.kind.value} identifier already registered: "
                    f"{unit.identifier}",
                    metadata={
                        "kind": unit.kind.value,
                        "identifier": unit.identifier,
                        "unit_id": str(existing.id),
                    },
                )
            return self._repository.insert_unit(unit=unit)

    def get_unit(self, *, unit_id: int) -> StorageUnit | None:
        return self._repository.get_unit(unit_id=unit_id)

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=(fields.UNIT_ID, "suffix"),
    )
    def add_file(
        self, *, unit_id: int, source_path: Path, suffix: str
    ) -> ContentReference:
        """Import ``source_path`` at ``<kind>/<identifier>/<suffix>``.

        A suffix the unit already lists is not recorded twice. If recording a
        new suffix fails, the imported reference is deleted again before the
        error propagates.
        """
        try:
            suffix = normalize_virtual_path(value=suffix, field_name="suffix")
        except ValueError as exc:
            raise StorageUnitValidationError(str(exc)) from exc
        with self._lock:
            unit = self._require_unit(unit_id)
            virtual_path = unit.virtual_path(suffix)
            reference = self._files.import_file(
                source_path=source_path, virtual_path=virtual_path
            )
            if suffix in unit.file_references:
                return reference
            try:
                self._repository.replace_file_references(
                    unit_id=unit_id,
                    file_references=(*unit.file_references, suffix),
                )
            except Exception:
                self._cleanup_unowned_reference(virtual_path=virtual_path)
                raise
            return reference

    def resolve_file(self, *, unit_id: int, suffix: str) -> Path | None:
        """Resolve one owned file, or ``None`` for unknown units and files."""
        unit = self._repository.get_unit(unit_id=unit_id)
        if unit is None:
            return None
        return self._files.resolve(virtual_path=unit.virtual_path(suffix))

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=(fields.UNIT_ID,),
    )
    def delete_unit(self, *, unit_id: int) -> bool:
        """Release every owned virtual path, then remove the unit record."""
        with self._lock:
            unit = self._repository.get_unit(unit_id=unit_id)
            if unit is None:
                return False
            for virtual_path in unit.virtual_paths():
                self._files.delete_reference(virtual_path=virtual_path)
            return self._repository.delete_unit(unit_id=unit_id)

    def find_conflicting(
        self, *, kind: StorageUnitKind, identifier: str
    ) -> StorageUnit | None:
        return self._repository.find_unit(kind=kind, identifier=identifier)

    def list_units(self, *, kind: StorageUnitKind | None = None) -> list[StorageUnit]:
        return self._repository.list_units(kind=kind)

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def clear(self) -> int:
        """Delete every unit record. Stored files are cleared separately."""
        with self._lock:
            return self._repository.delete_all_units()

    def _require_unit(self, unit_id: int) -> StorageUnit:
        unit = self._repository.get_unit(unit_id=unit_id)
        if unit is None:
            raise NotFoundError(
                f"storage unit not found: {unit_id}", metadata={"unit_id": str(unit_id)}
            )
        return unit

    def _cleanup_unowned_reference(self, *, virtual_path: str) -> None:
        """Best-effort removal of a reference whose owner update failed."""
        try:
            self._files.delete_reference(virtual_path=virtual_path)
        except OSError:
            _LOGGER.warning(
                "Failed to release unowned reference: virtual_path=%s",
                virtual_path,
                exc_info=True,
            )
