"""Client-side registry of LLM models built from the OpenRouter catalog."""

from llm_registry.builder import build_indices, build_registry
from llm_registry.errors import (
    CacheError,
    EmptyUpstreamError,
    MalformedPricingError,
    MissingIdError,
    OpenRouterError,
    RegistryError,
)
from llm_registry.models import (
    LLMModel,
    ModelCapabilities,
    ModelPricing,
    ModelProvider,
    ModelQueryOptions,
    ModelRegistry,
    OpenRouterModel,
    RegistryMetadata,
)
from llm_registry.query import query_models

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "build_registry",
    "build_indices",
    "query_models",
    "LLMModel",
    "ModelCapabilities",
    "ModelPricing",
    "ModelProvider",
    "ModelQueryOptions",
    "ModelRegistry",
    "OpenRouterModel",
    "RegistryMetadata",
    "RegistryError",
    "MalformedPricingError",
    "MissingIdError",
    "EmptyUpstreamError",
    "OpenRouterError",
    "CacheError",
]
