"""Cached raw batch used to rebuild a registry offline."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from llm_registry.models.openrouter import OpenRouterModel
from llm_registry.models.registry import REGISTRY_VERSION


class RegistrySnapshot(BaseModel):
    """Root data structure of the snapshot cache file."""

    version: str = REGISTRY_VERSION
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    models: list[OpenRouterModel] = Field(default_factory=list)
