"""File Storage Service native API exports."""

from services.state.file_storage.config import (
    SERVICE_COMPONENT_ID,
    FileStorageSettings,
    resolve_file_storage_settings,
)
from services.state.file_storage.domain import ContentReference, ReferenceField
from services.state.file_storage.errors import (
    DuplicateVirtualPathError,
    InvalidExtensionError,
    InvalidVirtualPathError,
)
from services.state.file_storage.interfaces import ReferenceRepository
from services.state.file_storage.service import (
    FileStorageService,
    build_file_storage_service,
)

__all__ = [
    "SERVICE_COMPONENT_ID",
    "ContentReference",
    "DuplicateVirtualPathError",
    "FileStorageService",
    "FileStorageSettings",
    "InvalidExtensionError",
    "InvalidVirtualPathError",
    "ReferenceField",
    "ReferenceRepository",
    "build_file_storage_service",
    "resolve_file_storage_settings",
]
