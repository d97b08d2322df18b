"""Authoritative in-process Python API for File Storage Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from packages.stash_shared.config import StashSettings
from resources.substrates.filesystem.substrate import (
    FilesystemBlobSubstrate,
    MigrationReport,
)
from services.state.file_storage.domain import ContentReference
from services.state.file_storage.interfaces import ReferenceRepository


class FileStorageService(ABC):
    """Public API for deduplicated, virtual-path addressed blob storage."""

    @abstractmethod
    def import_file(self, *, source_path: Path, virtual_path: str) -> ContentReference:
        """Move one local file into the store under ``virtual_path``."""

    @abstractmethod
    def import_bytes(
        self, *, content: bytes, virtual_path: str, extension: str
    ) -> ContentReference:
        """Store in-memory content under ``virtual_path``."""

    @abstractmethod
    def resolve(self, *, virtual_path: str) -> Path | None:
        """Return the readable physical path for one virtual path, if any."""

    @abstractmethod
    def get_reference(self, *, virtual_path: str) -> ContentReference | None:
        """Return the stored reference record for one virtual path."""

    @abstractmethod
    def delete_reference(self, *, virtual_path: str) -> bool:
        """Remove one virtual path, compacting its collision group when needed."""

    @abstractmethod
    def migrate_layout(self) -> MigrationReport:
        """Move blobs left in the legacy flat layout into sharded paths."""

    @abstractmethod
    def clear(self) -> int:
        """Delete every blob and reference; return the removed reference count."""


def build_file_storage_service(
    *,
    settings: StashSettings,
    repository: ReferenceRepository | None = None,
    blob_store: FilesystemBlobSubstrate | None = None,
) -> FileStorageService:
    """Build default File Storage implementation from typed settings."""
    from resources.substrates.filesystem import (
        LocalFilesystemBlobSubstrate,
        resolve_filesystem_substrate_settings,
    )
    from services.state.file_storage.config import resolve_file_storage_settings
    from services.state.file_storage.data import (
        ReferenceSqlRuntime,
        SqlReferenceRepository,
    )
    from services.state.file_storage.implementation import (
        DefaultFileStorageService,
    )

    if repository is None:
        runtime = ReferenceSqlRuntime.from_settings(settings)
        repository = SqlReferenceRepository(runtime.sessions)
    if blob_store is None:
        blob_store = LocalFilesystemBlobSubstrate(
            settings=resolve_filesystem_substrate_settings(settings)
        )
    return DefaultFileStorageService(
        settings=resolve_file_storage_settings(settings),
        repository=repository,
        blob_store=blob_store,
    )
