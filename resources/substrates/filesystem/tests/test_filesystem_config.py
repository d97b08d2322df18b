"""Configuration tests for filesystem substrate settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from packages.stash_shared.config import load_settings
from resources.substrates.filesystem.config import (
    FilesystemSubstrateSettings,
    resolve_filesystem_substrate_settings,
)


def test_root_dir_is_required() -> None:
    """Blank root directory should fail validation."""
    with pytest.raises(ValueError, match="root_dir is required"):
        FilesystemSubstrateSettings(root_dir="  ")


def test_temp_prefix_rejects_separators() -> None:
    """Temp prefix is a filename fragment and must not nest directories."""
    with pytest.raises(ValueError, match="path separators"):
        FilesystemSubstrateSettings(temp_prefix="a/b")


def test_chunk_size_must_be_positive() -> None:
    """Zero chunk size would never make progress while comparing."""
    with pytest.raises(ValueError):
        FilesystemSubstrateSettings(chunk_size=0)


def test_resolves_from_grouped_component_settings(tmp_path: Path) -> None:
    """Substrate settings should come from ``components.substrate.filesystem``."""
    settings = load_settings(
        environ={"STASH_COMPONENTS__SUBSTRATE__FILESYSTEM__FSYNC_WRITES": "false"},
        cli_params={
            "components": {"substrate": {"filesystem": {"root_dir": str(tmp_path)}}}
        },
        config_path=tmp_path / "missing.yaml",
    )

    resolved = resolve_filesystem_substrate_settings(settings)

    assert resolved.root_path() == tmp_path.resolve()
    assert resolved.fsync_writes is False
