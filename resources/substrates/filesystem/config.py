"""Pydantic settings for the filesystem substrate component."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.stash_shared.config import StashSettings, resolve_component_settings

RESOURCE_COMPONENT_ID = "substrate_filesystem"


class FilesystemSubstrateSettings(BaseModel):
    """Filesystem substrate runtime settings for blob persistence."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    root_dir: str = "./var/blobs"
    temp_prefix: str = "blobtmp"
    fsync_writes: bool = True
    chunk_size: int = Field(default=64 * 1024, gt=0)

    @field_validator("root_dir")
    @classmethod
    def _validate_root_dir(cls, value: str) -> str:
        """Require a non-empty root directory path."""
        normalized = value.strip()
        if normalized == "":
            raise ValueError("root_dir is required")
        return normalized

    @field_validator("temp_prefix")
    @classmethod
    def _validate_temp_prefix(cls, value: str) -> str:
        """Require a non-empty temporary filename prefix without separators."""
        normalized = value.strip()
        if normalized == "":
            raise ValueError("temp_prefix is required")
        if "/" in normalized or "\\" in normalized:
            raise ValueError("temp_prefix must not contain path separators")
        return normalized

    def root_path(self) -> Path:
        """Return the expanded root path for substrate operations."""
        return Path(self.root_dir).expanduser().resolve()


def resolve_filesystem_substrate_settings(
    settings: StashSettings,
) -> FilesystemSubstrateSettings:
    """Resolve filesystem substrate settings from ``components.substrate.filesystem``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=FilesystemSubstrateSettings,
    )
