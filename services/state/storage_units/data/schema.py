"""SQLAlchemy table definitions owned by Storage Unit Service."""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    false,
)

metadata = MetaData()

storage_units = Table(
    "storage_units",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("kind", String(16), nullable=False),
    Column("identifier", String(255), nullable=False),
    Column("version", Integer, nullable=False),
    Column("file_references", JSON, nullable=False),
    Column("added_at", DateTime(timezone=True), nullable=False),
    Column("is_default_asset", Boolean, nullable=False, server_default=false()),
    UniqueConstraint("kind", "identifier", name="uq_storage_units_kind_identifier"),
)
