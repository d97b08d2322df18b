"""Protocol for filename-keyed filesystem blob substrate operations."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict


class MigrationReport(BaseModel):
    """Outcome of one flat-to-sharded layout migration pass."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    moved: tuple[str, ...] = ()
    dropped_duplicates: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()


class FilesystemBlobSubstrate(Protocol):
    """Protocol for sharded, filename-keyed blob persistence."""

    @property
    def root(self) -> Path:
        """Return the absolute storage root."""

    def resolve_path(self, *, filename: str) -> Path:
        """Resolve the absolute sharded path for one stored filename."""

    def exists(self, *, filename: str) -> bool:
        """Return whether a blob is stored under one filename."""

    def same_content(self, *, filename: str, source: Path) -> bool:
        """Return whether the stored blob is byte-identical to ``source``."""

    def write_from_file(self, *, filename: str, source: Path) -> Path:
        """Atomically store the bytes of ``source`` under one filename."""

    def copy_blob(self, *, source_filename: str, target_filename: str) -> Path:
        """Atomically overwrite one stored blob with another's bytes."""

    def read_blob(self, *, filename: str) -> bytes:
        """Read one stored blob."""

    def delete_blob(self, *, filename: str) -> bool:
        """Delete one stored blob and return whether a file existed."""

    def iter_blob_names(self) -> Iterator[str]:
        """Yield every stored filename in the sharded layout."""

    def stage_bytes(self, *, content: bytes, suffix: str) -> Path:
        """Write bytes to a private staging file under the root."""

    def migrate_flat_layout(self) -> MigrationReport:
        """Move files stored directly under the root into the sharded layout."""

    def clear(self) -> None:
        """Delete the whole storage root and recreate it empty."""
