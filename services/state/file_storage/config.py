"""Pydantic settings for File Storage Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from packages.stash_shared.config import StashSettings, resolve_component_settings

SERVICE_COMPONENT_ID = "service_file_storage"


class FileStorageSettings(BaseModel):
    """File Storage Service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    migrate_on_startup: bool = False


def resolve_file_storage_settings(settings: StashSettings) -> FileStorageSettings:
    """Resolve service settings from ``components.service.file_storage``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=FileStorageSettings,
    )
