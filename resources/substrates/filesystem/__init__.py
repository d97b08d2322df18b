"""Filesystem substrate resource exports."""

from resources.substrates.filesystem.config import (
    RESOURCE_COMPONENT_ID,
    FilesystemSubstrateSettings,
    resolve_filesystem_substrate_settings,
)
from resources.substrates.filesystem.filesystem_substrate import (
    LocalFilesystemBlobSubstrate,
)
from resources.substrates.filesystem.sharding import shard, unshard
from resources.substrates.filesystem.substrate import (
    FilesystemBlobSubstrate,
    MigrationReport,
)

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "FilesystemSubstrateSettings",
    "FilesystemBlobSubstrate",
    "LocalFilesystemBlobSubstrate",
    "MigrationReport",
    "resolve_filesystem_substrate_settings",
    "shard",
    "unshard",
]
