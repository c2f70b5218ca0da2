"""Pydantic models for raw OpenRouter API responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _RawModel(BaseModel):
    """Base for upstream records: tolerant of unknown keys, never mutated."""

    model_config = ConfigDict(extra="ignore", frozen=True)


# Upstream sends decimal strings; some mirrors send bare numbers.
PriceValue = str | int | float | None


class OpenRouterPricing(_RawModel):
    """Per-token prices as decimal strings (e.g. "0.000005")."""

    prompt: PriceValue = None
    completion: PriceValue = None
    image: PriceValue = None  # Per image, not per token
    request: PriceValue = None


class OpenRouterArchitecture(_RawModel):
    """Modality information for a model."""

    modality: str | None = None  # e.g., "text+image->text"
    input_modalities: list[str] | None = None
    output_modalities: list[str] | None = None
    tokenizer: str | None = None
    instruct_type: str | None = None


class OpenRouterTopProvider(_RawModel):
    """Limits reported by the upstream provider serving the model."""

    context_length: int | None = None
    max_completion_tokens: int | None = None
    is_moderated: bool = False


class OpenRouterModel(_RawModel):
    """A model record as returned by ``GET /models``."""

    id: str | None = None  # e.g., "anthropic/claude-sonnet-4"
    name: str | None = None
    created: int | None = None  # Unix timestamp
    description: str | None = None
    context_length: int | None = None
    pricing: OpenRouterPricing | None = None
    architecture: OpenRouterArchitecture | None = None
    top_provider: OpenRouterTopProvider | None = None
    per_request_limits: dict[str, Any] | None = None
    supported_parameters: list[str] | None = None


class OpenRouterModelsResponse(BaseModel):
    """Envelope of the ``GET /models`` response."""

    data: list[dict[str, Any]] = Field(default_factory=list)
