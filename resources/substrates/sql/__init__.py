"""Shared SQL substrate primitives for Stash metadata stores."""

from resources.substrates.sql.config import (
    RESOURCE_COMPONENT_ID,
    SqlSettings,
    resolve_sql_settings,
)
from resources.substrates.sql.engine import create_sql_engine
from resources.substrates.sql.health import ping
from resources.substrates.sql.session import (
    SessionProvider,
    create_session_factory,
    transactional_session,
)

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "SessionProvider",
    "SqlSettings",
    "create_session_factory",
    "create_sql_engine",
    "ping",
    "resolve_sql_settings",
    "transactional_session",
]
