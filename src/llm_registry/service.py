"""Keeps the current registry and refreshes it from upstream."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from llm_registry.builder import build_registry
from llm_registry.errors import CacheError, EmptyUpstreamError, OpenRouterError
from llm_registry.fallback import fallback_records
from llm_registry.logging import configure_logging, get_logger
from llm_registry.models.snapshot import RegistrySnapshot
from llm_registry.models_cache import ModelsCache
from llm_registry.openrouter_client import OpenRouterClient
from llm_registry.query import query_models

if TYPE_CHECKING:
    from llm_registry.models.query import ModelQueryOptions
    from llm_registry.models.registry import LLMModel, ModelRegistry
    from llm_registry.settings import RegistrySettings

logger = get_logger(__name__)


class RegistryService:
    """Owns the published registry and rebuilds it when it expires.

    Sources are tried in order: the OpenRouter API, the snapshot cache, the
    bundled fallback catalog. A new registry replaces the old one with a
    single assignment, so readers never see a partly built registry.
    """

    def __init__(
        self,
        client: OpenRouterClient,
        cache: ModelsCache | None = None,
        ttl_seconds: int = 24 * 60 * 60,
        fallback_ttl_seconds: int = 5 * 60,
    ) -> None:
        """Initialize the service.

        Args:
            client: Client for the OpenRouter API.
            cache: Snapshot cache; without one, API failures go straight to
                the fallback catalog.
            ttl_seconds: Lifetime of a registry built from the API.
            fallback_ttl_seconds: Lifetime of a registry built from the
                snapshot or fallback catalog.
        """
        self.client = client
        self.cache = cache
        self.ttl = timedelta(seconds=ttl_seconds)
        self.fallback_ttl = timedelta(seconds=fallback_ttl_seconds)
        self._current: ModelRegistry | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: RegistrySettings) -> RegistryService:
        """Create a service configured from settings.

        Also applies the logging settings.
        """
        configure_logging(json_output=settings.log_json, log_level=settings.log_level)
        client = OpenRouterClient(
            base_url=settings.openrouter_base_url,
            api_key=settings.openrouter_api_key,
            timeout=settings.request_timeout,
        )
        return cls(
            client=client,
            cache=ModelsCache(settings.cache_file),
            ttl_seconds=settings.cache_ttl_seconds,
            fallback_ttl_seconds=settings.fallback_ttl_seconds,
        )

    @property
    def current(self) -> ModelRegistry | None:
        """The published registry, if any."""
        return self._current

    async def get_registry(self) -> ModelRegistry:
        """Return the published registry, refreshing it first if stale."""
        registry = self._current
        if registry is not None and not registry.is_expired():
            return registry

        async with self._lock:
            # Another task may have refreshed while we waited.
            if self._current is not registry and self._current is not None:
                return self._current
            return await self._refresh()

    async def refresh(self) -> ModelRegistry:
        """Rebuild and publish a new registry unconditionally."""
        async with self._lock:
            return await self._refresh()

    async def query(
        self,
        options: ModelQueryOptions | None = None,
        **kwargs: Any,
    ) -> list[LLMModel]:
        """Query the current registry; see :func:`llm_registry.query.query_models`."""
        return query_models(await self.get_registry(), options, **kwargs)

    async def _refresh(self) -> ModelRegistry:
        registry = await self._from_api()
        if registry is None:
            registry = await self._from_snapshot()
        if registry is None:
            registry = build_registry(fallback_records(), "fallback", ttl=self.fallback_ttl)

        self._current = registry
        logger.info(
            "Published model registry",
            source=registry.metadata.source,
            model_count=registry.metadata.model_count,
            expires_at=registry.metadata.expires_at.isoformat(),
        )
        return registry

    async def _from_api(self) -> ModelRegistry | None:
        try:
            records = await self.client.fetch_models()
            registry = build_registry(records, "api", ttl=self.ttl)
        except (OpenRouterError, EmptyUpstreamError) as e:
            logger.warning("Could not build registry from API", error=str(e))
            return None

        if self.cache is not None:
            snapshot = RegistrySnapshot(fetched_at=registry.metadata.fetched_at, models=records)
            try:
                await self.cache.save(snapshot)
            except CacheError as e:
                logger.warning("Could not save snapshot", error=str(e))

        return registry

    async def _from_snapshot(self) -> ModelRegistry | None:
        if self.cache is None:
            return None

        snapshot = await self.cache.load()
        if snapshot is None:
            return None

        try:
            return build_registry(snapshot.models, "snapshot", ttl=self.fallback_ttl)
        except EmptyUpstreamError as e:
            logger.warning("Snapshot holds no usable models", error=str(e))
            return None
