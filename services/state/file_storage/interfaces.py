"""Protocol interfaces used by File Storage Service."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from services.state.file_storage.domain import ContentReference, ReferenceField


class ReferenceRepository(Protocol):
    """Persistent mapping of virtual paths to content references."""

    def get_reference(self, *, virtual_path: str) -> ContentReference | None:
        """Read one reference by primary key."""

    def find_references(
        self, *, field: ReferenceField, value: str
    ) -> list[ContentReference]:
        """Return every reference whose ``field`` equals ``value``."""

    def insert_reference(self, *, reference: ContentReference) -> None:
        """Insert one reference; raise ``DuplicateVirtualPathError`` if the key exists."""

    def update_references(self, *, references: Sequence[ContentReference]) -> None:
        """Upsert references by primary key in one transaction."""

    def delete_reference(self, *, virtual_path: str) -> bool:
        """Delete one reference and return whether it existed."""

    def delete_all_references(self) -> int:
        """Delete every reference and return how many were removed."""
