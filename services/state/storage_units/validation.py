"""Rule-table validation for storage units."""

from __future__ import annotations

from services.state.storage_units.domain import KIND_RULES, StorageUnit
from services.state.storage_units.errors import StorageUnitValidationError


def validate_unit(unit: StorageUnit) -> None:
    """Raise ``StorageUnitValidationError`` when ``unit`` breaks its kind rule."""
    rule = KIND_RULES[unit.kind]
    metadata = {"kind": unit.kind.value, "identifier": unit.identifier}
    if unit.identifier.strip() == "":
        raise StorageUnitValidationError("identifier is empty", metadata=metadata)
    if rule.identifier_pattern.fullmatch(unit.identifier) is None:
        raise StorageUnitValidationError(
            f"identifier is not valid for {unit.kind.value}: {unit.identifier}",
            metadata=metadata,
        )
    if len(unit.file_references) < rule.min_file_references:
        raise StorageUnitValidationError(
            f"{unit.kind.value} requires at least "
            f"{rule.min_file_references} file reference(s)",
            metadata=metadata,
        )
