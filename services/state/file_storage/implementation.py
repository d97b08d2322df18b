"""Concrete File Storage Service implementation."""

from __future__ import annotations

from pathlib import Path
from threading import RLock
from typing import Callable

from packages.stash_shared.config import StashSettings
from packages.stash_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_logged,
)
from packages.stash_shared.path_validation import (
    normalize_extension,
    normalize_virtual_path,
)
from resources.substrates.filesystem import (
    FilesystemBlobSubstrate,
    LocalFilesystemBlobSubstrate,
    MigrationReport,
    resolve_filesystem_substrate_settings,
)
from services.state.file_storage.config import (
    SERVICE_COMPONENT_ID,
    FileStorageSettings,
    resolve_file_storage_settings,
)
from services.state.file_storage.data import (
    ReferenceSqlRuntime,
    SqlReferenceRepository,
)
from services.state.file_storage.domain import ContentReference
from services.state.file_storage.errors import (
    DuplicateVirtualPathError,
    InvalidExtensionError,
    InvalidVirtualPathError,
)
from services.state.file_storage.hashing import (
    digest_file,
    increment_digest,
    stored_filename,
)
from services.state.file_storage.interfaces import ReferenceRepository
from services.state.file_storage.service import FileStorageService

_LOGGER = get_logger(__name__)

DigestFunction = Callable[[Path], bytes]


class DefaultFileStorageService(FileStorageService):
    """Default implementation over a reference repository and a blob substrate.

    Mutating operations are serialized per instance with a re-entrant lock.
    Separate processes sharing one root are not coordinated.
    """

    def __init__(
        self,
        *,
        settings: FileStorageSettings,
        repository: ReferenceRepository,
        blob_store: FilesystemBlobSubstrate,
        digest: DigestFunction | None = None,
    ) -> None:
        self._settings = settings
        self._repository = repository
        self._blob_store = blob_store
        self._digest = digest or digest_file
        self._lock = RLock()
        if settings.migrate_on_startup:
            self.migrate_layout()

    @classmethod
    def from_settings(cls, settings: StashSettings) -> "DefaultFileStorageService":
        """Build the service from typed settings and owned resources."""
        runtime = ReferenceSqlRuntime.from_settings(settings)
        return cls(
            settings=resolve_file_storage_settings(settings),
            repository=SqlReferenceRepository(runtime.sessions),
            blob_store=LocalFilesystemBlobSubstrate(
                settings=resolve_filesystem_substrate_settings(settings)
            ),
        )

    @property
    def blob_store(self) -> FilesystemBlobSubstrate:
        """Return the physical substrate backing this service."""
        return self._blob_store

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=(fields.VIRTUAL_PATH,),
    )
    def import_file(self, *, source_path: Path, virtual_path: str) -> ContentReference:
        """Move one local file into the store under ``virtual_path``.

        The source is consumed: it is deleted once the reference is committed.
        Identical content already stored is reused; a different file holding
        the same name moves the probe one digest increment up.
        """
        source = Path(source_path)
        key = _validated_virtual_path(virtual_path)
        extension = _validated_extension(source.suffix)
        with self._lock:
            self._require_absent(virtual_path=key)
            reference = self._store(source=source, virtual_path=key, extension=extension)
            source.unlink(missing_ok=True)
            return reference

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=(fields.VIRTUAL_PATH,),
    )
    def import_bytes(
        self, *, content: bytes, virtual_path: str, extension: str
    ) -> ContentReference:
        """Store in-memory content under ``virtual_path``."""
        key = _validated_virtual_path(virtual_path)
        suffix = _validated_extension(extension)
        with self._lock:
            self._require_absent(virtual_path=key)
            staged = self._blob_store.stage_bytes(content=content, suffix=suffix)
            try:
                return self._store(source=staged, virtual_path=key, extension=suffix)
            finally:
                staged.unlink(missing_ok=True)

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=(fields.VIRTUAL_PATH,),
    )
    def resolve(self, *, virtual_path: str) -> Path | None:
        """Return the absolute physical path for one virtual path.

        ``None`` is returned both for unknown virtual paths and for references
        whose physical file has gone missing.
        """
        reference = self._repository.get_reference(virtual_path=virtual_path)
        if reference is None:
            return None
        path = self._blob_store.resolve_path(filename=reference.real_path)
        if not path.is_file():
            _LOGGER.warning(
                "Reference points at missing blob: virtual_path=%s real_path=%s",
                virtual_path,
                reference.real_path,
            )
            return None
        return path

    def get_reference(self, *, virtual_path: str) -> ContentReference | None:
        """Return the stored reference record for one virtual path."""
        return self._repository.get_reference(virtual_path=virtual_path)

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=(fields.VIRTUAL_PATH,),
    )
    def delete_reference(self, *, virtual_path: str) -> bool:
        """Remove one virtual path and keep its collision group dense.

        When the removed reference was the last user of its slot, the group's
        topmost slot is moved down into the vacated one so the group stays a
        contiguous run of digest increments starting at the canonical name.
        """
        with self._lock:
            reference = self._repository.get_reference(virtual_path=virtual_path)
            if reference is None:
                return False

            with log_context(
                {
                    fields.REAL_PATH: reference.real_path,
                    fields.CANONICAL_PATH: reference.canonical_path,
                }
            ):
                sharing = self._repository.find_references(
                    field="real_path", value=reference.real_path
                )
                if len(sharing) <= 1:
                    self._release_slot(reference)
                self._repository.delete_reference(virtual_path=virtual_path)
            return True

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def migrate_layout(self) -> MigrationReport:
        """Move blobs left in the legacy flat layout into sharded paths."""
        with self._lock:
            return self._blob_store.migrate_flat_layout()

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def clear(self) -> int:
        """Delete every blob and every reference."""
        with self._lock:
            self._blob_store.clear()
            removed = self._repository.delete_all_references()
            _LOGGER.info("Cleared blob store: references_removed=%d", removed)
            return removed

    def _require_absent(self, *, virtual_path: str) -> None:
        if self._repository.get_reference(virtual_path=virtual_path) is not None:
            raise DuplicateVirtualPathError(virtual_path)

    def _store(
        self, *, source: Path, virtual_path: str, extension: str
    ) -> ContentReference:
        """Probe for a slot, write bytes if new, then commit the reference."""
        digest = self._digest(source)
        canonical = stored_filename(digest, extension)
        candidate = canonical
        while self._blob_store.exists(filename=candidate):
            if self._blob_store.same_content(filename=candidate, source=source):
                break
            _LOGGER.info(
                "Digest collision: candidate=%s canonical=%s", candidate, canonical
            )
            digest = increment_digest(digest)
            candidate = stored_filename(digest, extension)

        written = False
        if self._blob_store.exists(filename=candidate):
            _LOGGER.debug("Reusing stored blob: real_path=%s", candidate)
        else:
            self._blob_store.write_from_file(filename=candidate, source=source)
            written = True

        reference = ContentReference(
            virtual_path=virtual_path,
            real_path=candidate,
            canonical_path=canonical,
        )
        try:
            self._repository.insert_reference(reference=reference)
        except Exception:
            if written:
                self._cleanup_orphaned_blob(filename=candidate)
            raise
        return reference

    def _release_slot(self, reference: ContentReference) -> None:
        """Free the slot of a reference that is the last user of its blob."""
        group = self._repository.find_references(
            field="canonical_path", value=reference.canonical_path
        )
        successor = max(group, key=lambda item: item.real_path, default=reference)
        if successor.real_path == reference.real_path:
            self._blob_store.delete_blob(filename=reference.real_path)
            return

        if not self._blob_store.exists(filename=successor.real_path):
            _LOGGER.warning(
                "Compaction source missing; dropping slot: canonical=%s source=%s",
                reference.canonical_path,
                successor.real_path,
            )
            self._blob_store.delete_blob(filename=reference.real_path)
            return

        self._blob_store.copy_blob(
            source_filename=successor.real_path,
            target_filename=reference.real_path,
        )
        moved = [
            item.model_copy(update={"real_path": reference.real_path})
            for item in self._repository.find_references(
                field="real_path", value=successor.real_path
            )
        ]
        self._repository.update_references(references=moved)
        self._blob_store.delete_blob(filename=successor.real_path)
        _LOGGER.info(
            "Compacted collision group: canonical=%s moved=%s->%s references=%d",
            reference.canonical_path,
            successor.real_path,
            reference.real_path,
            len(moved),
        )

    def _cleanup_orphaned_blob(self, *, filename: str) -> None:
        """Best-effort cleanup for a blob whose reference failed to commit."""
        try:
            self._blob_store.delete_blob(filename=filename)
        except OSError:
            _LOGGER.warning(
                "Failed to clean up orphaned blob: real_path=%s",
                filename,
                exc_info=True,
            )


def _validated_virtual_path(value: str) -> str:
    try:
        return normalize_virtual_path(value=value)
    except ValueError as exc:
        raise InvalidVirtualPathError(str(exc), metadata={"virtual_path": value}) from exc


def _validated_extension(value: str) -> str:
    try:
        return normalize_extension(value=value)
    except ValueError as exc:
        raise InvalidExtensionError(str(exc), metadata={"extension": value}) from exc
