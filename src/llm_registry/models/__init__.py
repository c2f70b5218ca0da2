"""Pydantic models for the LLM model registry."""

from llm_registry.models.openrouter import (
    OpenRouterArchitecture,
    OpenRouterModel,
    OpenRouterModelsResponse,
    OpenRouterPricing,
    OpenRouterTopProvider,
)
from llm_registry.models.query import ModelQueryOptions, SortKey, SortOrder
from llm_registry.models.registry import (
    REGISTRY_VERSION,
    SIZE_TIERS,
    LLMModel,
    Modality,
    ModelCapabilities,
    ModelPricing,
    ModelProvider,
    ModelRegistry,
    RegistryMetadata,
    RegistrySource,
    SizeTier,
    build_indices,
)
from llm_registry.models.snapshot import RegistrySnapshot

__all__ = [
    # Raw OpenRouter records
    "OpenRouterArchitecture",
    "OpenRouterModel",
    "OpenRouterModelsResponse",
    "OpenRouterPricing",
    "OpenRouterTopProvider",
    # Registry records
    "LLMModel",
    "ModelCapabilities",
    "ModelPricing",
    "ModelProvider",
    "ModelRegistry",
    "RegistryMetadata",
    "build_indices",
    "REGISTRY_VERSION",
    "SIZE_TIERS",
    "Modality",
    "RegistrySource",
    "SizeTier",
    # Queries
    "ModelQueryOptions",
    "SortKey",
    "SortOrder",
    # Cache
    "RegistrySnapshot",
]
