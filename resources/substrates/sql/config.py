"""Pydantic settings for the SQL metadata substrate."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from packages.stash_shared.config import StashSettings, resolve_component_settings

RESOURCE_COMPONENT_ID = "substrate_sql"


class SqlSettings(BaseModel):
    """Runtime settings for constructing the SQLAlchemy engine."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = "sqlite:///./var/stash.db"
    echo: bool = False
    pool_pre_ping: bool = True

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        """Require a non-empty SQLAlchemy URL."""
        normalized = value.strip()
        if normalized == "":
            raise ValueError("url is required")
        return normalized

    def is_sqlite(self) -> bool:
        """Return whether the configured URL targets SQLite."""
        return self.url.startswith("sqlite")


def resolve_sql_settings(settings: StashSettings) -> SqlSettings:
    """Resolve SQL substrate settings from ``components.substrate.sql``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=SqlSettings,
    )
