"""Configuration tests for SQL substrate settings."""

from __future__ import annotations

import pytest

from packages.stash_shared.config import load_settings
from resources.substrates.sql.config import SqlSettings, resolve_sql_settings


def test_default_url_targets_local_sqlite() -> None:
    """Default metadata store should be a local SQLite file."""
    settings = SqlSettings()

    assert settings.is_sqlite() is True
    assert settings.url.endswith("stash.db")


def test_blank_url_is_rejected() -> None:
    """Blank URL should fail validation."""
    with pytest.raises(ValueError, match="url is required"):
        SqlSettings(url="   ")


def test_env_overrides_component_url(tmp_path) -> None:
    """Env var should feed ``components.substrate.sql.url``."""
    settings = load_settings(
        environ={"STASH_COMPONENTS__SUBSTRATE__SQL__URL": "postgresql://db/stash"},
        config_path=tmp_path / "missing.yaml",
    )

    assert resolve_sql_settings(settings).url == "postgresql://db/stash"
    assert resolve_sql_settings(settings).is_sqlite() is False
