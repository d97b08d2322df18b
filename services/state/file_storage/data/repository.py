"""SQL repository for File Storage Service content references."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from resources.substrates.sql import SessionProvider
from services.state.file_storage.domain import (
    REFERENCE_FIELDS,
    ContentReference,
    ReferenceField,
)
from services.state.file_storage.errors import DuplicateVirtualPathError
from services.state.file_storage.interfaces import ReferenceRepository

from .schema import content_references

_FIELD_COLUMNS = {name: content_references.c[name] for name in REFERENCE_FIELDS}


class SqlReferenceRepository(ReferenceRepository):
    """SQL repository over the ``content_references`` table."""

    def __init__(self, sessions: SessionProvider) -> None:
        self._sessions = sessions

    def get_reference(self, *, virtual_path: str) -> ContentReference | None:
        """Read one reference row by virtual path."""
        with self._sessions.session() as session:
            row = (
                session.execute(
                    select(content_references).where(
                        content_references.c.virtual_path == virtual_path
                    )
                )
                .mappings()
                .one_or_none()
            )
            return None if row is None else _to_reference(row)

    def find_references(
        self, *, field: ReferenceField, value: str
    ) -> list[ContentReference]:
        """Return every reference row whose ``field`` column equals ``value``."""
        column = _FIELD_COLUMNS.get(field)
        if column is None:
            raise ValueError(f"unsupported reference field: {field}")
        with self._sessions.session() as session:
            rows = (
                session.execute(
                    select(content_references)
                    .where(column == value)
                    .order_by(content_references.c.virtual_path)
                )
                .mappings()
                .all()
            )
            return [_to_reference(row) for row in rows]

    def insert_reference(self, *, reference: ContentReference) -> None:
        """Insert one reference row; map primary-key conflicts to domain error."""
        try:
            with self._sessions.session() as session:
                session.execute(
                    insert(content_references).values(**reference.model_dump())
                )
        except IntegrityError as exc:
            raise DuplicateVirtualPathError(reference.virtual_path) from exc

    def update_references(self, *, references: Sequence[ContentReference]) -> None:
        """Upsert reference rows by virtual path inside one transaction."""
        if not references:
            return
        with self._sessions.session() as session:
            for reference in references:
                result = session.execute(
                    update(content_references)
                    .where(content_references.c.virtual_path == reference.virtual_path)
                    .values(
                        real_path=reference.real_path,
                        canonical_path=reference.canonical_path,
                    )
                )
                if int(result.rowcount or 0) == 0:
                    session.execute(
                        insert(content_references).values(**reference.model_dump())
                    )

    def delete_reference(self, *, virtual_path: str) -> bool:
        """Delete one reference row and return whether it existed."""
        with self._sessions.session() as session:
            result = session.execute(
                delete(content_references).where(
                    content_references.c.virtual_path == virtual_path
                )
            )
            return int(result.rowcount or 0) > 0

    def delete_all_references(self) -> int:
        """Delete every reference row and return the removed count."""
        with self._sessions.session() as session:
            result = session.execute(delete(content_references))
            return int(result.rowcount or 0)


def _to_reference(row: Mapping[str, Any]) -> ContentReference:
    """Map one SQL row to an immutable domain reference."""
    return ContentReference(
        virtual_path=str(row["virtual_path"]),
        real_path=str(row["real_path"]),
        canonical_path=str(row["canonical_path"]),
    )
