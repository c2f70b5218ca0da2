"""Query options for filtering and sorting a registry."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

SortKey = Literal["context", "price", "name", "provider"]
SortOrder = Literal["asc", "desc"]


class ModelQueryOptions(BaseModel):
    """Filters, ordering and limit for :func:`llm_registry.query.query_models`.

    Every field is optional. Filters combine with AND; list-valued fields
    match any of their values. Out-of-range values are accepted and simply
    match nothing.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: str | list[str] | None = None  # Provider ids, e.g. ["openai", "meta"]
    tier: str | list[str] | None = None  # Size tiers; unknown names match nothing
    modality: str | list[str] | None = None
    min_context: int | None = None  # Inclusive
    max_context: int | None = None  # Inclusive
    supports_images: bool | None = None
    supports_tools: bool | None = None
    supports_streaming: bool | None = None
    is_free: bool | None = None
    max_prompt_price: float | None = None  # Per million prompt tokens, inclusive
    search: str | None = None  # Case-insensitive substring of name or id
    sort_by: SortKey | None = None
    sort_order: SortOrder = "asc"
    limit: int | None = None
