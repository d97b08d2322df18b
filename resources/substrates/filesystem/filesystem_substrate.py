"""Filesystem-backed blob substrate with sharded layout and atomic writes."""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Iterator
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import BinaryIO

from packages.stash_shared.logging import get_logger
from resources.substrates.filesystem.config import FilesystemSubstrateSettings
from resources.substrates.filesystem.sharding import SHARD_DEPTH, is_shardable, shard
from resources.substrates.filesystem.substrate import (
    FilesystemBlobSubstrate,
    MigrationReport,
)

_LOGGER = get_logger(__name__)


class LocalFilesystemBlobSubstrate(FilesystemBlobSubstrate):
    """Persist/retrieve blobs on local disk under two-level sharded paths."""

    def __init__(self, *, settings: FilesystemSubstrateSettings) -> None:
        self._settings = settings
        self._root = settings.root_path()

    @property
    def root(self) -> Path:
        """Return the absolute storage root."""
        return self._root

    def resolve_path(self, *, filename: str) -> Path:
        """Resolve the deterministic filesystem path for one stored filename."""
        return self._root.joinpath(shard(filename))

    def exists(self, *, filename: str) -> bool:
        """Return whether a regular file is stored under one filename."""
        return self.resolve_path(filename=filename).is_file()

    def same_content(self, *, filename: str, source: Path) -> bool:
        """Compare one stored blob to ``source`` by length, then bytewise."""
        stored = self.resolve_path(filename=filename)
        if stored.stat().st_size != source.stat().st_size:
            return False

        chunk_size = self._settings.chunk_size
        with stored.open("rb") as left, source.open("rb") as right:
            while True:
                left_chunk = left.read(chunk_size)
                right_chunk = right.read(chunk_size)
                if left_chunk != right_chunk:
                    return False
                if not left_chunk:
                    return True

    def write_from_file(self, *, filename: str, source: Path) -> Path:
        """Atomically store the bytes of ``source`` and return the final path."""

        def _copy(handle: BinaryIO) -> None:
            with source.open("rb") as reader:
                shutil.copyfileobj(reader, handle, self._settings.chunk_size)

        return self._atomic_write(self.resolve_path(filename=filename), _copy)

    def copy_blob(self, *, source_filename: str, target_filename: str) -> Path:
        """Atomically overwrite ``target_filename`` with ``source_filename`` bytes."""
        source = self.resolve_path(filename=source_filename)
        if not source.is_file():
            raise FileNotFoundError(f"stored blob not found: {source_filename}")
        return self.write_from_file(filename=target_filename, source=source)

    def read_blob(self, *, filename: str) -> bytes:
        """Read one stored blob."""
        return self.resolve_path(filename=filename).read_bytes()

    def delete_blob(self, *, filename: str) -> bool:
        """Delete one stored blob and return whether a file existed."""
        path = self.resolve_path(filename=filename)
        if not path.exists():
            return False
        path.unlink()
        return True

    def iter_blob_names(self) -> Iterator[str]:
        """Yield stored filenames found in the sharded layout, sorted."""
        if not self._root.is_dir():
            return
        pattern = "/".join("*" * (SHARD_DEPTH + 1))
        for path in sorted(self._root.glob(pattern)):
            if not path.is_file() or path.name.startswith("."):
                continue
            if path.relative_to(self._root).as_posix() == shard(path.name).as_posix():
                yield path.name

    def stage_bytes(self, *, content: bytes, suffix: str) -> Path:
        """Write bytes to a private staging file directly under the root."""
        self._ensure_root()
        with NamedTemporaryFile(
            mode="wb",
            prefix=f".{self._settings.temp_prefix}-stage-",
            suffix=suffix,
            dir=self._root,
            delete=False,
        ) as handle:
            handle.write(content)
            return Path(handle.name)

    def migrate_flat_layout(self) -> MigrationReport:
        """Move files stored directly under the root into the sharded layout.

        A flat file whose sharded counterpart already exists is dropped. Hidden
        files (temp and staging files) and names too short to shard are left
        in place. Re-running after a complete pass finds nothing to do.
        """
        if not self._root.is_dir():
            return MigrationReport()

        moved: list[str] = []
        dropped: list[str] = []
        skipped: list[str] = []
        for entry in sorted(self._root.iterdir()):
            if not entry.is_file():
                continue
            name = entry.name
            if name.startswith(".") or not is_shardable(name):
                skipped.append(name)
                continue
            if self.exists(filename=name):
                entry.unlink()
                dropped.append(name)
                _LOGGER.info("Dropped flat blob already present in sharded layout: %s", name)
                continue
            self.write_from_file(filename=name, source=entry)
            entry.unlink()
            moved.append(name)

        if moved:
            _LOGGER.info("Migrated %d flat blobs into sharded layout", len(moved))
        return MigrationReport(
            moved=tuple(moved),
            dropped_duplicates=tuple(dropped),
            skipped=tuple(skipped),
        )

    def clear(self) -> None:
        """Delete the whole storage root and recreate it empty."""
        if self._root.exists():
            shutil.rmtree(self._root)
        self._root.mkdir(parents=True, exist_ok=True)

    def _ensure_root(self) -> None:
        """Create the root when missing and reject a non-directory root."""
        if not self._root.exists():
            self._root.mkdir(parents=True, exist_ok=True)
        if not self._root.is_dir():
            raise OSError(f"filesystem substrate root is not a directory: {self._root}")

    def _atomic_write(self, path: Path, write: Callable[[BinaryIO], None]) -> Path:
        """Write through a sibling temp file and ``os.replace`` it into place."""
        self._ensure_root()
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="wb",
                prefix=f".{self._settings.temp_prefix}-",
                suffix=".tmp",
                dir=path.parent,
                delete=False,
            ) as handle:
                tmp_path = Path(handle.name)
                write(handle)
                handle.flush()
                if self._settings.fsync_writes:
                    os.fsync(handle.fileno())

            os.replace(tmp_path, path)
            return path
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink(missing_ok=True)
