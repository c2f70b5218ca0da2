"""Tests for the registry service."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from llm_registry.builder import build_registry
from llm_registry.errors import CacheError, OpenRouterError
from llm_registry.fallback import FALLBACK_MODELS
from llm_registry.logging import configure_logging
from llm_registry.models import OpenRouterModel, RegistrySnapshot
from llm_registry.service import RegistryService

if TYPE_CHECKING:
    from llm_registry.models_cache import ModelsCache


class FakeClient:
    """Stands in for OpenRouterClient."""

    def __init__(self, records: list[dict[str, Any]] | None = None, error: Exception | None = None):
        self.records = records or []
        self.error = error
        self.calls = 0

    async def fetch_models(self) -> list[OpenRouterModel]:
        self.calls += 1
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return [OpenRouterModel.model_validate(r) for r in self.records]


class BrokenCache:
    """Cache whose writes always fail."""

    async def save(self, snapshot: RegistrySnapshot) -> None:
        raise CacheError("disk full")

    async def load(self) -> None:
        return None


class TestRefresh:
    """Tests for source selection during refresh."""

    async def test_from_api(
        self, raw_records: list[dict[str, Any]], models_cache: ModelsCache
    ) -> None:
        """Test a successful fetch publishes an api registry and saves a snapshot."""
        service = RegistryService(FakeClient(raw_records), models_cache, ttl_seconds=3600)

        registry = await service.refresh()

        assert registry.metadata.source == "api"
        assert registry.metadata.model_count == len(raw_records)
        assert service.current is registry
        snapshot = await models_cache.load()
        assert snapshot is not None
        assert len(snapshot.models) == len(raw_records)

    async def test_from_snapshot(
        self, raw_records: list[dict[str, Any]], models_cache: ModelsCache
    ) -> None:
        """Test an API failure falls back to the snapshot."""
        await models_cache.save(
            RegistrySnapshot(models=[OpenRouterModel.model_validate(r) for r in raw_records])
        )
        service = RegistryService(
            FakeClient(error=OpenRouterError("HTTP error: 503", retryable=True)),
            models_cache,
            fallback_ttl_seconds=60,
        )

        registry = await service.refresh()

        assert registry.metadata.source == "snapshot"
        assert registry.metadata.model_count == len(raw_records)
        lifetime = registry.metadata.expires_at - registry.metadata.fetched_at
        assert lifetime.total_seconds() == 60

    async def test_from_fallback(self, models_cache: ModelsCache) -> None:
        """Test the bundled catalog is used without API or snapshot."""
        service = RegistryService(FakeClient(error=OpenRouterError("down")), models_cache)

        registry = await service.refresh()

        assert registry.metadata.source == "fallback"
        assert registry.metadata.model_count == len(FALLBACK_MODELS)

    async def test_empty_upstream_falls_back(self, models_cache: ModelsCache) -> None:
        """Test an empty API batch is not published."""
        service = RegistryService(FakeClient([]), models_cache)

        registry = await service.refresh()

        assert registry.metadata.source == "fallback"
        assert await models_cache.load() is None

    async def test_without_cache(self) -> None:
        """Test a service without cache goes straight to the fallback."""
        service = RegistryService(FakeClient(error=OpenRouterError("down")))
        registry = await service.refresh()
        assert registry.metadata.source == "fallback"

    async def test_cache_write_failure(self, raw_records: list[dict[str, Any]]) -> None:
        """Test a failing snapshot write does not fail the refresh."""
        service = RegistryService(FakeClient(raw_records), BrokenCache())  # type: ignore[arg-type]
        registry = await service.refresh()
        assert registry.metadata.source == "api"

    async def test_refresh_replaces_registry(self, raw_records: list[dict[str, Any]]) -> None:
        """Test a refresh publishes a new registry and leaves the old one intact."""
        client = FakeClient(raw_records)
        service = RegistryService(client)
        first = await service.refresh()

        client.records = raw_records[:2]
        second = await service.refresh()

        assert second is not first
        assert service.current is second
        assert first.metadata.model_count == len(raw_records)
        assert second.metadata.model_count == 2


class TestGetRegistry:
    """Tests for lazy loading and expiry."""

    async def test_loads_once(self, raw_records: list[dict[str, Any]]) -> None:
        """Test a fresh registry is reused."""
        client = FakeClient(raw_records)
        service = RegistryService(client)

        first = await service.get_registry()
        second = await service.get_registry()

        assert first is second
        assert client.calls == 1

    async def test_concurrent_callers_share_refresh(
        self, raw_records: list[dict[str, Any]]
    ) -> None:
        """Test concurrent first calls trigger a single fetch."""
        client = FakeClient(raw_records)
        service = RegistryService(client)

        results = await asyncio.gather(*(service.get_registry() for _ in range(5)))

        assert client.calls == 1
        assert all(r is results[0] for r in results)

    async def test_refreshes_when_expired(self, raw_records: list[dict[str, Any]]) -> None:
        """Test an expired registry is rebuilt."""
        client = FakeClient(raw_records)
        service = RegistryService(client)
        stale = build_registry(raw_records, "api", fetched_at=datetime(2020, 1, 1, tzinfo=UTC))
        service._current = stale

        fresh = await service.get_registry()

        assert fresh is not stale
        assert fresh.is_expired() is False
        assert client.calls == 1

    async def test_query(self, raw_records: list[dict[str, Any]]) -> None:
        """Test querying through the service."""
        service = RegistryService(FakeClient(raw_records))
        result = await service.query(provider="openai")
        assert [m.id for m in result] == ["openai/gpt-4o"]


class TestFromSettings:
    """Tests for RegistryService.from_settings."""

    def test_from_settings(self, tmp_path: Path) -> None:
        """Test the service is wired from settings."""
        from llm_registry.settings import RegistrySettings

        settings = RegistrySettings(
            openrouter_base_url="https://example.test/api/v1",
            openrouter_api_key="sk-test",
            request_timeout=5.0,
            cache_file=tmp_path / "snapshot.json",
            cache_ttl_seconds=120,
            fallback_ttl_seconds=30,
            log_json=False,
            log_level="DEBUG",
        )

        service = RegistryService.from_settings(settings)

        assert service.client.base_url == "https://example.test/api/v1"
        assert service.client.api_key is not None
        assert service.client.api_key.get_secret_value() == "sk-test"
        assert service.client.timeout == 5.0
        assert service.cache is not None
        assert service.cache.cache_file == tmp_path / "snapshot.json"
        assert service.ttl.total_seconds() == 120
        assert service.fallback_ttl.total_seconds() == 30

    def test_from_settings_configures_logging(self, tmp_path: Path) -> None:
        """Test the logging settings are applied."""
        from llm_registry.settings import RegistrySettings

        settings = RegistrySettings(
            _env_file=None,
            cache_file=tmp_path / "snapshot.json",
            log_json=True,
            log_level="WARNING",
        )

        try:
            RegistryService.from_settings(settings)
            config = structlog.get_config()
            assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
            assert config["wrapper_class"] is structlog.make_filtering_bound_logger(
                logging.WARNING
            )
        finally:
            configure_logging(json_output=False, log_level="DEBUG")
