"""Data-layer exports for File Storage Service."""

from services.state.file_storage.data.memory import InMemoryReferenceRepository
from services.state.file_storage.data.repository import SqlReferenceRepository
from services.state.file_storage.data.runtime import ReferenceSqlRuntime

__all__ = [
    "InMemoryReferenceRepository",
    "ReferenceSqlRuntime",
    "SqlReferenceRepository",
]
