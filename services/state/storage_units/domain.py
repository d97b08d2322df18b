"""Domain contracts for storage units that own virtual paths."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.stash_shared.path_validation import normalize_virtual_path


class StorageUnitKind(str, Enum):
    """Closed set of owner categories that hold stored files."""

    LEVEL = "level"
    PACK = "pack"
    THEME = "theme"


@dataclass(frozen=True)
class KindRule:
    """Validation rule applied to every unit of one kind."""

    identifier_pattern: re.Pattern[str]
    min_file_references: int = 0


_IDENTIFIER = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")

KIND_RULES: dict[StorageUnitKind, KindRule] = {
    StorageUnitKind.LEVEL: KindRule(identifier_pattern=_IDENTIFIER, min_file_references=1),
    StorageUnitKind.PACK: KindRule(identifier_pattern=_IDENTIFIER),
    StorageUnitKind.THEME: KindRule(identifier_pattern=_IDENTIFIER),
}


class StorageUnit(BaseModel):
    """One owner record whose files live under ``<kind>/<identifier>/``.

    ``file_references`` holds suffixes relative to the unit, not full virtual
    paths. ``id`` is assigned by the repository on insert.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int | None = None
    kind: StorageUnitKind
    identifier: str
    version: int = Field(default=1, ge=0)
    file_references: tuple[str, ...] = ()
    added_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
    is_default_asset: bool = False

    @field_validator("file_references")
    @classmethod
    def _validate_file_references(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Require well-formed, distinct suffixes."""
        normalized = tuple(
            normalize_virtual_path(value=item, field_name="file reference")
            for item in value
        )
        if len(set(normalized)) != len(normalized):
            raise ValueError("file references must be distinct")
        return normalized

    def with_file_references(self, file_references: Sequence[str]) -> StorageUnit:
        """Return a validated copy owning exactly ``file_references``."""
        return StorageUnit.model_validate(
            {**self.model_dump(), "file_references": tuple(file_references)}
        )

    def virtual_path(self, suffix: str) -> str:
        """Return the global virtual path of one file owned by this unit."""
        return "/".join((self.kind.value, self.identifier, suffix))

    def virtual_paths(self) -> list[str]:
        """Return every virtual path owned by this unit."""
        return [self.virtual_path(suffix) for suffix in self.file_references]
