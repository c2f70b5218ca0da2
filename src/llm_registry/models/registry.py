"""Pydantic models for the normalized, indexed model registry."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

if TYPE_CHECKING:
    from llm_registry.models.query import ModelQueryOptions

SizeTier = Literal["tiny", "small", "medium", "large", "massive"]
Modality = Literal["text", "image", "multimodal"]
RegistrySource = Literal["api", "snapshot", "fallback"]

# Smallest to largest; indices and listings follow this order.
SIZE_TIERS: tuple[SizeTier, ...] = ("tiny", "small", "medium", "large", "massive")

REGISTRY_VERSION = "1.0"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ModelProvider(_Frozen):
    """Vendor of a model, derived from the model id prefix."""

    id: str  # e.g., "openai"
    name: str  # Display name
    color: str  # Hex brand color
    icon: str | None = None


class ModelPricing(_Frozen):
    """Normalized cost figures (USD)."""

    prompt_per_million: float = Field(default=0.0, ge=0)
    completion_per_million: float = Field(default=0.0, ge=0)
    image_per_image: float | None = Field(default=None, ge=0)
    is_free: bool = True
    malformed: bool = False  # Some upstream value was unparseable and replaced by 0

    @model_validator(mode="after")
    def _check_free(self) -> ModelPricing:
        free = self.prompt_per_million == 0 and self.completion_per_million == 0
        if self.is_free != free:
            raise ValueError("is_free must be true exactly when both per-million rates are 0")
        return self


class ModelCapabilities(_Frozen):
    """Feature flags inferred from the upstream record."""

    supports_images: bool = False
    supports_tools: bool = False
    supports_streaming: bool = True
    is_moderated: bool = False
    modality: Modality = "text"
    instruct_type: str | None = None

    @model_validator(mode="after")
    def _check_modality(self) -> ModelCapabilities:
        if (self.modality != "text") != self.supports_images:
            raise ValueError(f"modality {self.modality!r} disagrees with supports_images")
        return self


class LLMModel(_Frozen):
    """Canonical enriched model record owned by a registry."""

    id: str
    slug: str
    name: str
    description: str | None = None
    provider: ModelProvider
    context_length: int = Field(ge=0)
    max_completion_tokens: int = Field(ge=0)
    size_tier: SizeTier
    pricing: ModelPricing
    capabilities: ModelCapabilities
    updated_at: datetime


class RegistryMetadata(_Frozen):
    """Provenance of a registry."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    version: str = REGISTRY_VERSION
    fetched_at: datetime
    expires_at: datetime
    model_count: int = Field(ge=0)
    source: RegistrySource

    @model_validator(mode="after")
    def _check_expiry(self) -> RegistryMetadata:
        if self.expires_at <= self.fetched_at:
            raise ValueError("expires_at must be after fetched_at")
        return self


ModelIndices = tuple[
    Mapping[str, LLMModel],
    Mapping[str, tuple[LLMModel, ...]],
    Mapping[SizeTier, tuple[LLMModel, ...]],
]


def build_indices(models: Iterable[LLMModel]) -> ModelIndices:
    """Derive the by-id, by-provider and by-tier indices from a model list.

    Index values are the model instances themselves, in list order. The
    returned mappings are read-only views.
    """
    by_id: dict[str, LLMModel] = {}
    by_provider: dict[str, list[LLMModel]] = {}
    by_tier: dict[SizeTier, list[LLMModel]] = {tier: [] for tier in SIZE_TIERS}

    for model in models:
        by_id[model.id] = model
        by_provider.setdefault(model.provider.id, []).append(model)
        by_tier[model.size_tier].append(model)

    return (
        MappingProxyType(by_id),
        MappingProxyType({provider_id: tuple(group) for provider_id, group in by_provider.items()}),
        MappingProxyType({tier: tuple(group) for tier, group in by_tier.items()}),
    )


class ModelRegistry(_Frozen):
    """Immutable snapshot of all known models plus lookup indices.

    Only ``metadata`` and ``models`` are inputs; ``by_id``, ``by_provider``
    and ``by_tier`` are derived from ``models`` on construction and exposed
    as read-only mappings. A refresh builds a new registry; an existing one
    is never modified.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    metadata: RegistryMetadata
    models: tuple[LLMModel, ...]

    _by_id: Mapping[str, LLMModel] = PrivateAttr()
    _by_provider: Mapping[str, tuple[LLMModel, ...]] = PrivateAttr()
    _by_tier: Mapping[SizeTier, tuple[LLMModel, ...]] = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._by_id, self._by_provider, self._by_tier = build_indices(self.models)

    @model_validator(mode="after")
    def _check_consistency(self) -> ModelRegistry:
        if self.metadata.model_count != len(self.models):
            raise ValueError(
                f"metadata.model_count={self.metadata.model_count} "
                f"but registry holds {len(self.models)} models"
            )
        if len({model.id for model in self.models}) != len(self.models):
            raise ValueError("model ids must be unique")
        return self

    @classmethod
    def from_models(cls, models: Iterable[LLMModel], metadata: RegistryMetadata) -> ModelRegistry:
        """Create a registry over ``models``."""
        return cls(metadata=metadata, models=tuple(models))

    @property
    def by_id(self) -> Mapping[str, LLMModel]:
        """Models keyed by id."""
        return self._by_id

    @property
    def by_provider(self) -> Mapping[str, tuple[LLMModel, ...]]:
        """Models grouped by provider id, in registry order."""
        return self._by_provider

    @property
    def by_tier(self) -> Mapping[SizeTier, tuple[LLMModel, ...]]:
        """Models grouped by size tier; every tier has an entry."""
        return self._by_tier

    def rebuild_indices(self) -> ModelIndices:
        """Recompute the indices from the flat model list."""
        return build_indices(self.models)

    def get(self, model_id: str) -> LLMModel | None:
        """Look up a model by id."""
        return self.by_id.get(model_id)

    @property
    def providers(self) -> list[ModelProvider]:
        """Distinct providers present in the registry, sorted by name."""
        seen = {group[0].provider.id: group[0].provider for group in self.by_provider.values()}
        return sorted(seen.values(), key=lambda p: (p.name.casefold(), p.id))

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the registry is past its expiry time."""
        return (now or datetime.now(UTC)) >= self.metadata.expires_at

    def query(self, options: ModelQueryOptions | None = None, **kwargs: Any) -> list[LLMModel]:
        """Filter and sort models; see :func:`llm_registry.query.query_models`."""
        from llm_registry.query import query_models

        return query_models(self, options, **kwargs)
