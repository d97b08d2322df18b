"""In-process reference repository for tests and ephemeral stores."""

from __future__ import annotations

from collections.abc import Sequence

from services.state.file_storage.domain import (
    REFERENCE_FIELDS,
    ContentReference,
    ReferenceField,
)
from services.state.file_storage.errors import DuplicateVirtualPathError
from services.state.file_storage.interfaces import ReferenceRepository


class InMemoryReferenceRepository(ReferenceRepository):
    """Dict-backed repository with the same contract as the SQL backend."""

    def __init__(self) -> None:
        self.rows: dict[str, ContentReference] = {}

    def get_reference(self, *, virtual_path: str) -> ContentReference | None:
        return self.rows.get(virtual_path)

    def find_references(
        self, *, field: ReferenceField, value: str
    ) -> list[ContentReference]:
        if field not in REFERENCE_FIELDS:
            raise ValueError(f"unsupported reference field: {field}")
        return [
            row
            for key, row in sorted(self.rows.items())
            if getattr(row, field) == value
        ]

    def insert_reference(self, *, reference: ContentReference) -> None:
        if reference.virtual_path in self.rows:
            raise DuplicateVirtualPathError(reference.virtual_path)
        self.rows[reference.virtual_path] = reference

    def update_references(self, *, references: Sequence[ContentReference]) -> None:
        for reference in references:
            self.rows[reference.virtual_path] = reference

    def delete_reference(self, *, virtual_path: str) -> bool:
        return self.rows.pop(virtual_path, None) is not None

    def delete_all_references(self) -> int:
        removed = len(self.rows)
        self.rows.clear()
        return removed
