"""Storage Unit Service native API exports."""

from services.state.storage_units.domain import (
    KIND_RULES,
    KindRule,
    StorageUnit,
    StorageUnitKind,
)
from services.state.storage_units.errors import StorageUnitValidationError
from services.state.storage_units.service import (
    StorageUnitService,
    build_storage_unit_service,
)

__all__ = [
    "KIND_RULES",
    "KindRule",
    "StorageUnit",
    "StorageUnitKind",
    "StorageUnitService",
    "StorageUnitValidationError",
    "build_storage_unit_service",
]
