"""SQL runtime wiring for Storage Unit Service."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine

from packages.stash_shared.config import StashSettings
from resources.substrates.sql import (
    SessionProvider,
    create_session_factory,
    create_sql_engine,
    resolve_sql_settings,
)

from .schema import metadata


@dataclass(frozen=True)
class StorageUnitSqlRuntime:
    """Concrete handle for Storage Unit Service SQL access."""

    engine: Engine
    sessions: SessionProvider

    @classmethod
    def from_settings(cls, settings: StashSettings) -> "StorageUnitSqlRuntime":
        return cls.from_engine(create_sql_engine(resolve_sql_settings(settings)))

    @classmethod
    def from_engine(cls, engine: Engine) -> "StorageUnitSqlRuntime":
        """Build the runtime over an existing engine and create owned tables."""
        metadata.create_all(engine)
        return cls(
            engine=engine,
            sessions=SessionProvider(session_factory=create_session_factory(engine)),
        )
