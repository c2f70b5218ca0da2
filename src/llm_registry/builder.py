"""Build an indexed ModelRegistry from raw OpenRouter records."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from decimal import Decimal, DecimalException, InvalidOperation
from typing import Any

from pydantic import ValidationError

from llm_registry.errors import EmptyUpstreamError, MalformedPricingError, MissingIdError
from llm_registry.logging import get_logger
from llm_registry.models.openrouter import (
    OpenRouterArchitecture,
    OpenRouterModel,
    OpenRouterPricing,
    PriceValue,
)
from llm_registry.models.registry import (
    LLMModel,
    Modality,
    ModelCapabilities,
    ModelPricing,
    ModelRegistry,
    RegistryMetadata,
    RegistrySource,
    SizeTier,
    build_indices,
)
from llm_registry.providers import resolve_provider

logger = get_logger(__name__)

DEFAULT_TTL = timedelta(hours=24)

# Inclusive upper bound of each tier by context length; anything above the
# last bound is "massive".
SIZE_TIER_BOUNDS: tuple[tuple[int, SizeTier], ...] = (
    (8_192, "tiny"),
    (32_768, "small"),
    (131_072, "medium"),
    (999_999, "large"),
)

TOKENS_PER_MILLION = Decimal(1_000_000)

_SLUG_INVALID = re.compile(r"[^a-z0-9.]+")

__all__ = [
    "DEFAULT_TTL",
    "SIZE_TIER_BOUNDS",
    "build_indices",
    "build_registry",
    "classify_size_tier",
    "infer_capabilities",
    "make_slug",
    "normalize_model",
    "parse_price",
    "parse_pricing",
    "parse_rate",
]


def classify_size_tier(context_length: int) -> SizeTier:
    """Bucket a context window size; negative sizes count as 0."""
    for upper, tier in SIZE_TIER_BOUNDS:
        if context_length <= upper:
            return tier
    return "massive"


def make_slug(model_id: str) -> str:
    """Derive a URL-safe slug, e.g. ``"openai/gpt-4o"`` -> ``"openai-gpt-4o"``."""
    return _SLUG_INVALID.sub("-", model_id.lower()).strip("-")


def parse_price(value: PriceValue, field: str) -> Decimal:
    """Parse one upstream price into a non-negative decimal.

    A missing value means zero.

    Raises:
        MalformedPricingError: If the value is not a finite number >= 0.
    """
    if value is None:
        return Decimal(0)
    if isinstance(value, bool):
        raise MalformedPricingError(field, value)

    text = value.strip() if isinstance(value, str) else str(value)
    try:
        price = Decimal(text)
    except InvalidOperation as e:
        raise MalformedPricingError(field, value) from e

    if not price.is_finite() or price < 0:
        raise MalformedPricingError(field, value)
    return price


def parse_rate(value: PriceValue, field: str, scale: Decimal = Decimal(1)) -> float:
    """Parse one upstream price and scale it, e.g. per token to per million.

    Raises:
        MalformedPricingError: If the value is malformed, or too large to
            scale into a finite float.
    """
    price = parse_price(value, field)
    try:
        rate = float(price * scale)
    except DecimalException as e:
        raise MalformedPricingError(field, value) from e
    if not math.isfinite(rate):
        raise MalformedPricingError(field, value)
    return rate


def parse_pricing(pricing: OpenRouterPricing | None, model_id: str = "") -> ModelPricing:
    """Convert per-token price strings to per-million rates.

    Malformed values are replaced by zero and the result is flagged
    ``malformed`` instead of failing.
    """
    pricing = pricing or OpenRouterPricing()
    malformed = False

    def recover(value: PriceValue, field: str, scale: Decimal = Decimal(1)) -> float:
        nonlocal malformed
        try:
            return parse_rate(value, field, scale)
        except MalformedPricingError as e:
            malformed = True
            logger.warning(
                "Malformed pricing, substituting zero",
                model_id=model_id,
                field=e.field,
                value=repr(e.value),
            )
            return 0.0

    prompt = recover(pricing.prompt, "prompt", TOKENS_PER_MILLION)
    completion = recover(pricing.completion, "completion", TOKENS_PER_MILLION)
    image = recover(pricing.image, "image") if pricing.image is not None else None

    return ModelPricing(
        prompt_per_million=prompt,
        completion_per_million=completion,
        image_per_image=image,
        is_free=prompt == 0 and completion == 0,
        malformed=malformed,
    )


def _split_modalities(architecture: OpenRouterArchitecture | None) -> set[str]:
    """Collect every input and output modality named by the architecture."""
    if architecture is None:
        return set()

    found = {m.strip().lower() for m in architecture.input_modalities or []}
    found.update(m.strip().lower() for m in architecture.output_modalities or [])

    if not found and architecture.modality:
        # "text+image->text", or a bare "text" / "multimodal" in older feeds
        for side in architecture.modality.lower().split("->"):
            found.update(part.strip() for part in side.split("+"))

    if "multimodal" in found:
        found.discard("multimodal")
        found.update(("text", "image"))

    found.discard("")
    return found


def infer_capabilities(raw: OpenRouterModel) -> ModelCapabilities:
    """Infer feature flags from a raw record.

    Modality is ``text`` unless images appear among the model's input or
    output modalities: ``image`` if they are the only modality,
    ``multimodal`` otherwise.
    """
    modalities = _split_modalities(raw.architecture)
    supports_images = "image" in modalities

    modality: Modality = "text"
    if supports_images:
        modality = "image" if modalities == {"image"} else "multimodal"

    params = set(raw.supported_parameters or [])
    top_provider = raw.top_provider

    return ModelCapabilities(
        supports_images=supports_images,
        supports_tools="tools" in params or "tool_choice" in params,
        supports_streaming=True,  # Every OpenRouter endpoint streams
        is_moderated=bool(top_provider and top_provider.is_moderated),
        modality=modality,
        instruct_type=raw.architecture.instruct_type if raw.architecture else None,
    )


def _updated_at(created: int | None, default: datetime) -> datetime:
    if created is None:
        return default
    try:
        return datetime.fromtimestamp(created, UTC)
    except (OverflowError, OSError, ValueError):
        return default


def normalize_model(raw: OpenRouterModel, fetched_at: datetime) -> LLMModel:
    """Turn one raw record into an LLMModel.

    Raises:
        MissingIdError: If the record has no usable id.
    """
    model_id = (raw.id or "").strip()
    if not model_id:
        raise MissingIdError("Model record has no id")

    top_provider = raw.top_provider
    context_length = raw.context_length
    if context_length is None and top_provider is not None:
        context_length = top_provider.context_length
    context_length = max(context_length or 0, 0)

    max_completion = top_provider.max_completion_tokens if top_provider else None
    if max_completion is None or max_completion < 0:
        max_completion = context_length

    return LLMModel(
        id=model_id,
        slug=make_slug(model_id),
        name=(raw.name or "").strip() or model_id,
        description=raw.description,
        provider=resolve_provider(model_id),
        context_length=context_length,
        max_completion_tokens=max_completion,
        size_tier=classify_size_tier(context_length),
        pricing=parse_pricing(raw.pricing, model_id),
        capabilities=infer_capabilities(raw),
        updated_at=_updated_at(raw.created, fetched_at),
    )


def build_registry(
    records: Iterable[OpenRouterModel | Mapping[str, Any]],
    source: RegistrySource,
    *,
    fetched_at: datetime | None = None,
    ttl: timedelta = DEFAULT_TTL,
) -> ModelRegistry:
    """Normalize a batch of raw records into a new registry.

    Bad records are skipped individually: those failing validation, those
    without an id, and repeats of an id already seen. Models are ordered by
    id.

    Args:
        records: Raw records, as models or plain dicts.
        source: Where the batch came from (api, snapshot, fallback).
        fetched_at: When the batch was obtained. Defaults to now.
        ttl: How long the registry stays fresh.

    Returns:
        A new ModelRegistry.

    Raises:
        EmptyUpstreamError: If no record survives normalization.
        ValueError: If ``ttl`` is not positive.
    """
    if ttl <= timedelta(0):
        raise ValueError(f"ttl must be positive, got {ttl}")

    fetched_at = fetched_at or datetime.now(UTC)
    models: dict[str, LLMModel] = {}
    rejected = 0

    for index, record in enumerate(records):
        try:
            raw = (
                record
                if isinstance(record, OpenRouterModel)
                else OpenRouterModel.model_validate(record)
            )
            model = normalize_model(raw, fetched_at)
        except ValidationError as e:
            rejected += 1
            logger.warning("Skipping invalid model record", index=index, error=str(e))
            continue
        except MissingIdError:
            rejected += 1
            logger.warning("Skipping model record without id", index=index)
            continue

        if model.id in models:
            rejected += 1
            logger.warning("Skipping duplicate model id", index=index, model_id=model.id)
            continue

        models[model.id] = model
        logger.debug(
            "Normalized model",
            model_id=model.id,
            provider=model.provider.id,
            size_tier=model.size_tier,
        )

    if not models:
        raise EmptyUpstreamError(source, rejected)

    ordered = sorted(models.values(), key=lambda m: m.id)
    metadata = RegistryMetadata(
        fetched_at=fetched_at,
        expires_at=fetched_at + ttl,
        model_count=len(ordered),
        source=source,
    )
    registry = ModelRegistry.from_models(ordered, metadata)

    logger.info(
        "Built model registry",
        source=source,
        model_count=len(ordered),
        provider_count=len(registry.by_provider),
        rejected=rejected,
    )
    return registry
