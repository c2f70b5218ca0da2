"""Registry settings using pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class RegistrySettings(BaseSettings):
    """Settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    LLM_REGISTRY_ prefix. The API key is also read from a plain
    OPENROUTER_API_KEY.
    """

    model_config = SettingsConfigDict(
        env_prefix="LLM_REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Upstream
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("LLM_REGISTRY_OPENROUTER_API_KEY", "OPENROUTER_API_KEY"),
    )
    request_timeout: float = 30.0  # Seconds

    # Snapshot cache
    cache_file: Path = Path.home() / ".llm_registry" / "models_snapshot.json"
    cache_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0)
    fallback_ttl_seconds: int = Field(default=5 * 60, gt=0)  # For snapshot/fallback registries

    # Logging
    log_level: str = "INFO"
    log_json: bool = True


# Global settings instance
settings = RegistrySettings()
