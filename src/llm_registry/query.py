"""Filter and sort the models of a registry."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from llm_registry.models.query import ModelQueryOptions, SortKey

if TYPE_CHECKING:
    from llm_registry.models.registry import LLMModel, ModelRegistry

SORT_KEYS: dict[SortKey, Callable[[LLMModel], Any]] = {
    "context": lambda m: m.context_length,
    "price": lambda m: m.pricing.prompt_per_million,
    "name": lambda m: m.name.casefold(),
    "provider": lambda m: m.provider.name.casefold(),
}


def _as_set(value: str | list[str] | None) -> set[str] | None:
    if value is None:
        return None
    values = [value] if isinstance(value, str) else value
    return {v.lower() for v in values}


def _build_predicate(options: ModelQueryOptions) -> Callable[[LLMModel], bool]:
    providers = _as_set(options.provider)
    tiers = _as_set(options.tier)
    modalities = _as_set(options.modality)
    search = options.search.casefold() if options.search else None

    def matches(model: LLMModel) -> bool:
        caps = model.capabilities
        if providers is not None and model.provider.id not in providers:
            return False
        if tiers is not None and model.size_tier not in tiers:
            return False
        if modalities is not None and caps.modality not in modalities:
            return False
        if options.min_context is not None and model.context_length < options.min_context:
            return False
        if options.max_context is not None and model.context_length > options.max_context:
            return False
        if options.supports_images is not None and caps.supports_images != options.supports_images:
            return False
        if options.supports_tools is not None and caps.supports_tools != options.supports_tools:
            return False
        if (
            options.supports_streaming is not None
            and caps.supports_streaming != options.supports_streaming
        ):
            return False
        if options.is_free is not None and model.pricing.is_free != options.is_free:
            return False
        if (
            options.max_prompt_price is not None
            and model.pricing.prompt_per_million > options.max_prompt_price
        ):
            return False
        if search is not None and not (
            search in model.name.casefold() or search in model.id.casefold()
        ):
            return False
        return True

    return matches


def query_models(
    registry: ModelRegistry,
    options: ModelQueryOptions | None = None,
    **kwargs: Any,
) -> list[LLMModel]:
    """Return the registry's models that satisfy ``options``, in order.

    Filters combine with AND, values within a list-valued filter with OR.
    Results are sorted by ``sort_by`` (ties broken by id ascending) and then
    truncated to ``limit``. Invalid ranges yield an empty list rather than an
    error. The registry is not modified and each call returns a new list.

    Args:
        registry: The registry to search.
        options: Query options. Keyword arguments, if given, override fields
            of ``options`` (or build one when it is omitted).

    Returns:
        Matching models.
    """
    if kwargs:
        base = options.model_dump(exclude_unset=True) if options else {}
        options = ModelQueryOptions(**{**base, **kwargs})
    elif options is None:
        options = ModelQueryOptions()

    if options.limit is not None and options.limit <= 0:
        return []

    matches = _build_predicate(options)
    results = [model for model in registry.models if matches(model)]

    # Two stable sorts: id first so equal keys keep id order in either direction.
    results.sort(key=lambda m: m.id)
    if options.sort_by is not None:
        results.sort(key=SORT_KEYS[options.sort_by], reverse=options.sort_order == "desc")

    if options.limit is not None:
        results = results[: options.limit]
    return results
