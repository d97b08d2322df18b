"""SQLAlchemy table definitions owned by File Storage Service."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    func,
)

metadata = MetaData()

content_references = Table(
    "content_references",
    metadata,
    Column("virtual_path", String(1024), primary_key=True),
    Column("real_path", String(255), nullable=False),
    Column("canonical_path", String(255), nullable=False),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    ),
    Index("ix_content_references_real_path", "real_path"),
    Index("ix_content_references_canonical_path", "canonical_path"),
    CheckConstraint("length(real_path) >= 2", name="ck_content_references_real_path"),
    CheckConstraint(
        "length(canonical_path) >= 2", name="ck_content_references_canonical_path"
    ),
)
