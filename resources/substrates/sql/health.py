"""Health-check utilities for the SQL substrate."""

from __future__ import annotations

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from packages.stash_shared.logging import get_logger

_LOGGER = get_logger(__name__)


def ping(engine: Engine) -> bool:
    """Return True when the database can answer a trivial query."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        _LOGGER.warning("SQL substrate ping failed", exc_info=True)
        return False
    return True
