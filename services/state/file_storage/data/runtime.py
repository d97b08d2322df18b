"""SQL runtime wiring for File Storage Service."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from packages.stash_shared.config import StashSettings
from resources.substrates.sql import (
    SessionProvider,
    create_session_factory,
    create_sql_engine,
    ping,
    resolve_sql_settings,
)

from .schema import metadata


@dataclass(frozen=True)
class ReferenceSqlRuntime:
    """Concrete handle for File Storage Service SQL access."""

    engine: Engine
    session_factory: sessionmaker[Session]
    sessions: SessionProvider

    @classmethod
    def from_settings(cls, settings: StashSettings) -> "ReferenceSqlRuntime":
        """Build the runtime from typed application settings."""
        return cls.from_engine(create_sql_engine(resolve_sql_settings(settings)))

    @classmethod
    def from_engine(cls, engine: Engine) -> "ReferenceSqlRuntime":
        """Build the runtime over an existing engine and create owned tables."""
        session_factory = create_session_factory(engine)
        runtime = cls(
            engine=engine,
            session_factory=session_factory,
            sessions=SessionProvider(session_factory=session_factory),
        )
        runtime.ensure_schema()
        return runtime

    def ensure_schema(self) -> None:
        """Create owned tables when missing."""
        metadata.create_all(self.engine)

    def is_healthy(self) -> bool:
        """Return ``True`` when the backing database is reachable."""
        return ping(self.engine)
