"""SQLAlchemy engine construction for the SQL metadata substrate."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url

from resources.substrates.sql.config import SqlSettings


def create_sql_engine(config: SqlSettings) -> Engine:
    """Construct a configured SQLAlchemy engine.

    File-backed SQLite databases get their parent directory created and
    foreign keys enabled on every connection.
    """
    if not config.is_sqlite():
        return create_engine(
            config.url,
            echo=config.echo,
            pool_pre_ping=config.pool_pre_ping,
        )

    url = make_url(config.url)
    if url.database and url.database != ":memory:":
        Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        url,
        echo=config.echo,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection: object, connection_record: object) -> None:
    """Turn on SQLite foreign key enforcement for one new DBAPI connection."""
    del connection_record
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()
