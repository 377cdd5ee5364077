from __future__ import annotations

import pytest
from pydantic import ValidationError

from modular_api.settings import DbConfig, Settings


def test_db_config_is_read_from_nested_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODAPI_DB_CONFIG__PROVIDER", "postgresql")
    monkeypatch.setenv("MODAPI_DB_CONFIG__CONNECTION_STRING", "postgresql://u:p@db/app")
    monkeypatch.setenv("MODAPI_DB_CONFIG__USE_IN_MEMORY_DB", "false")

    db = Settings().db_config
    assert db.provider == "postgresql"
    assert db.provider_key == "POSTGRESQL"
    assert db.connection_string == "postgresql://u:p@db/app"
    assert db.use_in_memory_db is False


def test_in_memory_flag_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODAPI_DB_CONFIG__USE_IN_MEMORY_DB", "true")
    assert Settings().db_config.use_in_memory_db is True


def test_db_config_is_immutable() -> None:
    config = DbConfig(provider="sqlite")
    with pytest.raises(ValidationError):
        config.provider = "POSTGRESQL"  # type: ignore[misc]


def test_connection_string_is_not_in_repr() -> None:
    config = DbConfig(connection_string="postgresql://u:secret@db/app")
    assert "secret" not in repr(config)
