"""
modular_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Carry the database configuration (`DbConfig`) consumed by the persistence layer.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DbConfig(BaseModel):
    """
    Database configuration shared by every module context.

    Frozen once constructed; when `use_in_memory_db` is set, `provider` and
    `connection_string` are ignored by all consumers.
    """

    model_config = ConfigDict(frozen=True)

    provider: str = "SQLITE"
    connection_string: str = Field(default="sqlite:///./modular_api.db", repr=False)
    use_in_memory_db: bool = False

    @property
    def provider_key(self) -> str:
        # Provider keys are compared upper-case downstream; `provider` keeps what was configured.
        return self.provider.strip().upper()


class Settings(BaseSettings):
    """
    Enterprise pattern:
    - Strict env-driven configuration
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(
        env_prefix="MODAPI_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "modular-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence (MODAPI_DB_CONFIG__PROVIDER, MODAPI_DB_CONFIG__USE_IN_MEMORY_DB, ...)
    db_config: DbConfig = Field(default_factory=DbConfig)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `DbConfig` is handed to `ContextBinder.load_config` explicitly at startup; nothing
# in the persistence layer reads settings through a global.
