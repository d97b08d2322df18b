"""Behavior tests for Storage Unit Service ownership semantics."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest

from packages.stash_shared.errors import ConflictError, NotFoundError
from resources.substrates.filesystem import (
    FilesystemSubstrateSettings,
    LocalFilesystemBlobSubstrate,
)
from resources.substrates.sql import SqlSettings, create_sql_engine
from services.state.file_storage.config import FileStorageSettings
from services.state.file_storage.data import InMemoryReferenceRepository
from services.state.file_storage.implementation import DefaultFileStorageService
from services.state.storage_units.data import (
    InMemoryStorageUnitRepository,
    SqlStorageUnitRepository,
    StorageUnitSqlRuntime,
)
from services.state.storage_units.domain import StorageUnit, StorageUnitKind
from services.state.storage_units.errors import StorageUnitValidationError
from services.state.storage_units.implementation import DefaultStorageUnitService


class _FailingUpdateRepository(InMemoryStorageUnitRepository):
    """Repository fake whose file reference updates fail."""

    def replace_file_references(
        self, *, unit_id: int, file_references: Sequence[str]
    ) -> StorageUnit | None:
        del unit_id, file_references
        raise RuntimeError("metadata store unavailable")


@pytest.fixture
def sql_units(tmp_path: Path) -> Iterator[SqlStorageUnitRepository]:
    """Yield a SQL unit repository over a fresh SQLite file."""
    engine = create_sql_engine(SqlSettings(url=f"sqlite:///{tmp_path / 'units.db'}"))
    yield SqlStorageUnitRepository(StorageUnitSqlRuntime.from_engine(engine).sessions)
    engine.dispose()


def _services(
    tmp_path: Path,
    *,
    repository: InMemoryStorageUnitRepository | SqlStorageUnitRepository | None = None,
) -> tuple[DefaultStorageUnitService, DefaultFileStorageService, InMemoryReferenceRepository]:
    references = InMemoryReferenceRepository()
    files = DefaultFileStorageService(
        settings=FileStorageSettings(),
        repository=references,
        blob_store=LocalFilesystemBlobSubstrate(
            settings=FilesystemSubstrateSettings(
                root_dir=str(tmp_path / "store"), fsync_writes=False
            )
        ),
    )
    units = DefaultStorageUnitService(
        repository=repository or InMemoryStorageUnitRepository(), files=files
    )
    return units, files, references


def _source(tmp_path: Path, name: str, content: bytes) -> Path:
    path = tmp_path / "incoming" / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def test_register_assigns_id_and_rejects_conflicts(tmp_path: Path) -> None:
    """A second unit with the same kind and identifier must conflict."""
    units, _, _ = _services(tmp_path)

    theme = units.register(
        unit=StorageUnit(kind=StorageUnitKind.THEME, identifier="dark")
    )

    assert theme.id is not None
    assert units.find_conflicting(kind=StorageUnitKind.THEME, identifier="dark") == theme
    with pytest.raises(ConflictError):
        units.register(unit=StorageUnit(kind=StorageUnitKind.THEME, identifier="dark"))
    other_kind = units.register(
        unit=StorageUnit(kind=StorageUnitKind.PACK, identifier="dark")
    )
    assert other_kind.id != theme.id


def test_register_applies_kind_rules(tmp_path: Path) -> None:
    """Rules are looked up per kind, not hard-coded per class."""
    units, _, _ = _services(tmp_path)

    with pytest.raises(StorageUnitValidationError, match="identifier is empty"):
        units.register(unit=StorageUnit(kind=StorageUnitKind.PACK, identifier=""))
    with pytest.raises(StorageUnitValidationError, match="not valid"):
        units.register(unit=StorageUnit(kind=StorageUnitKind.PACK, identifier="a/b"))
    with pytest.raises(StorageUnitValidationError, match="at least 1"):
        units.register(unit=StorageUnit(kind=StorageUnitKind.LEVEL, identifier="song"))


def test_add_resolve_and_delete_unit_files(tmp_path: Path) -> None:
    """Unit files live under ``<kind>/<identifier>/`` and go away with the unit."""
    units, files, references = _services(tmp_path)
    pack = units.register(unit=StorageUnit(kind=StorageUnitKind.PACK, identifier="base"))
    assert pack.id is not None

    reference = units.add_file(
        unit_id=pack.id,
        source_path=_source(tmp_path, "cover.jpg", b"cover"),
        suffix="cover.jpg",
    )

    assert reference.virtual_path == "pack/base/cover.jpg"
    assert units.get_unit(unit_id=pack.id).file_references == ("cover.jpg",)
    resolved = units.resolve_file(unit_id=pack.id, suffix="cover.jpg")
    assert resolved is not None
    assert resolved.read_bytes() == b"cover"

    assert units.delete_unit(unit_id=pack.id) is True
    assert units.delete_unit(unit_id=pack.id) is False
    assert references.rows == {}
    assert list(files.blob_store.iter_blob_names()) == []
    assert units.resolve_file(unit_id=pack.id, suffix="cover.jpg") is None


def test_level_registered_after_importing_its_chart(tmp_path: Path) -> None:
    """Deleting one level keeps content still used by another level."""
    units, files, _ = _services(tmp_path)
    for identifier in ("song-a", "song-b"):
        files.import_file(
            source_path=_source(tmp_path, f"{identifier}.aff", b"(0,0);"),
            virtual_path=f"level/{identifier}/chart.aff",
        )
    first = units.register(
        unit=StorageUnit(
            kind=StorageUnitKind.LEVEL,
            identifier="song-a",
            file_references=("chart.aff",),
        )
    )
    second = units.register(
        unit=StorageUnit(
            kind=StorageUnitKind.LEVEL,
            identifier="song-b",
            file_references=("chart.aff",),
        )
    )
    assert first.id is not None and second.id is not None

    units.delete_unit(unit_id=first.id)

    remaining = units.resolve_file(unit_id=second.id, suffix="chart.aff")
    assert remaining is not None
    assert remaining.read_bytes() == b"(0,0);"
    assert [unit.identifier for unit in units.list_units(kind=StorageUnitKind.LEVEL)] == [
        "song-b"
    ]


def test_add_file_requires_existing_unit(tmp_path: Path) -> None:
    """Importing into an unknown unit should raise not-found."""
    units, _, _ = _services(tmp_path)
    source = _source(tmp_path, "x.png", b"x")

    with pytest.raises(NotFoundError):
        units.add_file(unit_id=404, source_path=source, suffix="x.png")
    assert source.exists()


def test_clear_removes_every_unit(tmp_path: Path) -> None:
    """Clear should drop all unit records."""
    units, _, _ = _services(tmp_path)
    units.register(unit=StorageUnit(kind=StorageUnitKind.PACK, identifier="a"))
    units.register(unit=StorageUnit(kind=StorageUnitKind.THEME, identifier="b"))

    assert units.clear() == 2
    assert units.list_units() == []


def test_add_file_for_listed_suffix_keeps_unit_readable(
    tmp_path: Path, sql_units: SqlStorageUnitRepository
) -> None:
    """Importing a suffix the unit already lists must not record it twice."""
    units, files, references = _services(tmp_path, repository=sql_units)
    level = units.register(
        unit=StorageUnit(
            kind=StorageUnitKind.LEVEL,
            identifier="song",
            file_references=("chart.aff",),
        )
    )
    assert level.id is not None

    units.add_file(
        unit_id=level.id,
        source_path=_source(tmp_path, "chart.aff", b"(0,0);"),
        suffix="chart.aff",
    )

    stored = units.get_unit(unit_id=level.id)
    assert stored is not None
    assert stored.file_references == ("chart.aff",)
    resolved = units.resolve_file(unit_id=level.id, suffix="chart.aff")
    assert resolved is not None
    assert resolved.read_bytes() == b"(0,0);"

    assert units.delete_unit(unit_id=level.id) is True
    assert references.rows == {}
    assert list(files.blob_store.iter_blob_names()) == []


def test_add_file_appends_new_suffix_on_sql_backend(
    tmp_path: Path, sql_units: SqlStorageUnitRepository
) -> None:
    """New suffixes are appended after the ones listed at registration."""
    units, _, _ = _services(tmp_path, repository=sql_units)
    level = units.register(
        unit=StorageUnit(
            kind=StorageUnitKind.LEVEL,
            identifier="song",
            file_references=("chart.aff",),
        )
    )
    assert level.id is not None

    units.add_file(
        unit_id=level.id,
        source_path=_source(tmp_path, "base.jpg", b"jpeg"),
        suffix="base.jpg",
    )

    stored = units.get_unit(unit_id=level.id)
    assert stored is not None
    assert stored.file_references == ("chart.aff", "base.jpg")


def test_failed_owner_update_releases_imported_reference(tmp_path: Path) -> None:
    """A reference whose owner could not record it must not stay behind."""
    repository = _FailingUpdateRepository()
    units, files, references = _services(tmp_path, repository=repository)
    pack = units.register(unit=StorageUnit(kind=StorageUnitKind.PACK, identifier="base"))
    assert pack.id is not None

    with pytest.raises(RuntimeError, match="metadata store unavailable"):
        units.add_file(
            unit_id=pack.id,
            source_path=_source(tmp_path, "cover.jpg", b"cover"),
            suffix="cover.jpg",
        )

    assert references.rows == {}
    assert list(files.blob_store.iter_blob_names()) == []
    assert repository.rows[pack.id].file_references == ()


def test_in_memory_repository_validates_replaced_references() -> None:
    """The in-memory fake rejects duplicate suffixes like the SQL backend."""
    repository = InMemoryStorageUnitRepository()
    unit = repository.insert_unit(
        unit=StorageUnit(kind=StorageUnitKind.PACK, identifier="base")
    )
    assert unit.id is not None

    with pytest.raises(ValueError, match="distinct"):
        repository.replace_file_references(
            unit_id=unit.id, file_references=("a.png", "a.png")
        )

    assert repository.rows[unit.id].file_references == ()
