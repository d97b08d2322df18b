"""Data-layer exports for Storage Unit Service."""

from services.state.storage_units.data.memory import InMemoryStorageUnitRepository
from services.state.storage_units.data.repository import SqlStorageUnitRepository
from services.state.storage_units.data.runtime import StorageUnitSqlRuntime

__all__ = [
    "InMemoryStorageUnitRepository",
    "SqlStorageUnitRepository",
    "StorageUnitSqlRuntime",
]
