"""Shared test fixtures for llm-registry."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from llm_registry.logging import configure_logging

if TYPE_CHECKING:
    from llm_registry.models import ModelRegistry
    from llm_registry.models_cache import ModelsCache

FETCHED_AT = datetime(2025, 1, 1, tzinfo=UTC)

GPT_4O: dict[str, Any] = {
    "id": "openai/gpt-4o",
    "name": "OpenAI: GPT-4o",
    "context_length": 128000,
    "pricing": {"prompt": "0.000005", "completion": "0.000015"},
    "architecture": {"modality": "text+image->text"},
    "supported_parameters": ["tools", "temperature"],
}

LLAMA_3_8B: dict[str, Any] = {
    "id": "meta/llama-3-8b",
    "name": "Meta: Llama 3 8B",
    "context_length": 8192,
    "pricing": {"prompt": "0", "completion": "0"},
}


@pytest.fixture
def gpt_4o_record() -> dict[str, Any]:
    return dict(GPT_4O)


@pytest.fixture
def llama_record() -> dict[str, Any]:
    return dict(LLAMA_3_8B)


def pytest_configure(config: pytest.Config) -> None:
    configure_logging(json_output=False, log_level="DEBUG")


@pytest.fixture
def raw_records() -> list[dict[str, Any]]:
    """A small, clean raw batch covering several providers and tiers."""
    return [
        GPT_4O,
        LLAMA_3_8B,
        {
            "id": "anthropic/claude-sonnet-4",
            "name": "Anthropic: Claude Sonnet 4",
            "context_length": 200000,
            "pricing": {"prompt": "0.000003", "completion": "0.000015"},
            "architecture": {"input_modalities": ["text", "image"], "output_modalities": ["text"]},
            "top_provider": {"max_completion_tokens": 64000, "is_moderated": True},
        },
        {
            "id": "google/gemini-2.0-flash-001",
            "name": "Google: Gemini 2.0 Flash",
            "context_length": 1048576,
            "pricing": {"prompt": "0.0000001", "completion": "0.0000004"},
        },
        {
            "id": "mistralai/mistral-small",
            "name": "Mistral: Small",
            "context_length": 32768,
            "pricing": {"prompt": "0.0000002", "completion": "0.0000006"},
        },
    ]


@pytest.fixture
def registry(raw_records: list[dict[str, Any]]) -> ModelRegistry:
    """A registry built from ``raw_records``."""
    from llm_registry.builder import build_registry

    return build_registry(raw_records, "api", fetched_at=FETCHED_AT)


@pytest.fixture
def models_cache(tmp_path: Path) -> ModelsCache:
    """A snapshot cache in a temporary directory."""
    from llm_registry.models_cache import ModelsCache

    return ModelsCache(tmp_path / "cache" / "models_snapshot.json")


@pytest.fixture
def mock_transport() -> Callable[..., httpx.MockTransport]:
    """Build an httpx transport answering ``GET /models``."""

    def factory(
        payload: Any = None,
        status_code: int = 200,
        error: Exception | None = None,
    ) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if error is not None:
                raise error
            return httpx.Response(status_code, json=payload)

        return httpx.MockTransport(handler)

    return factory
