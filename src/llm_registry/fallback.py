"""Bundled catalog used when neither the API nor a snapshot is available."""

from __future__ import annotations

from typing import Any

from llm_registry.models.openrouter import OpenRouterModel

_TOOLS = ["tools", "tool_choice", "temperature", "max_tokens"]
_VISION = {
    "modality": "text+image->text",
    "input_modalities": ["text", "image"],
    "output_modalities": ["text"],
}
_TEXT = {"modality": "text->text", "input_modalities": ["text"], "output_modalities": ["text"]}

FALLBACK_MODELS: tuple[dict[str, Any], ...] = (
    {
        "id": "anthropic/claude-sonnet-4",
        "name": "Anthropic: Claude Sonnet 4",
        "context_length": 200_000,
        "pricing": {"prompt": "0.000003", "completion": "0.000015", "image": "0.0048"},
        "architecture": _VISION,
        "top_provider": {
            "context_length": 200_000,
            "max_completion_tokens": 64_000,
            "is_moderated": True,
        },
        "supported_parameters": _TOOLS,
    },
    {
        "id": "openai/gpt-4o",
        "name": "OpenAI: GPT-4o",
        "context_length": 128_000,
        "pricing": {"prompt": "0.0000025", "completion": "0.00001", "image": "0.003613"},
        "architecture": _VISION,
        "top_provider": {
            "context_length": 128_000,
            "max_completion_tokens": 16_384,
            "is_moderated": True,
        },
        "supported_parameters": _TOOLS,
    },
    {
        "id": "openai/gpt-4o-mini",
        "name": "OpenAI: GPT-4o-mini",
        "context_length": 128_000,
        "pricing": {"prompt": "0.00000015", "completion": "0.0000006"},
        "architecture": _VISION,
        "top_provider": {
            "context_length": 128_000,
            "max_completion_tokens": 16_384,
            "is_moderated": True,
        },
        "supported_parameters": _TOOLS,
    },
    {
        "id": "google/gemini-2.0-flash-001",
        "name": "Google: Gemini 2.0 Flash",
        "context_length": 1_048_576,
        "pricing": {"prompt": "0.0000001", "completion": "0.0000004"},
        "architecture": _VISION,
        "top_provider": {
            "context_length": 1_048_576,
            "max_completion_tokens": 8_192,
            "is_moderated": False,
        },
        "supported_parameters": _TOOLS,
    },
    {
        "id": "deepseek/deepseek-r1",
        "name": "DeepSeek: R1",
        "context_length": 163_840,
        "pricing": {"prompt": "0.0000004", "completion": "0.000002"},
        "architecture": _TEXT,
        "top_provider": {
            "context_length": 163_840,
            "is_moderated": False,
        },
        "supported_parameters": ["temperature", "max_tokens", "reasoning"],
    },
    {
        "id": "meta-llama/llama-3.1-8b-instruct",
        "name": "Meta: Llama 3.1 8B Instruct",
        "context_length": 131_072,
        "pricing": {"prompt": "0.00000002", "completion": "0.00000003"},
        "architecture": {**_TEXT, "instruct_type": "llama3"},
        "top_provider": {
            "context_length": 131_072,
            "max_completion_tokens": 8_192,
            "is_moderated": False,
        },
        "supported_parameters": _TOOLS,
    },
    {
        "id": "mistralai/mistral-7b-instruct:free",
        "name": "Mistral: Mistral 7B Instruct (free)",
        "context_length": 32_768,
        "pricing": {"prompt": "0", "completion": "0"},
        "architecture": {**_TEXT, "instruct_type": "mistral"},
        "top_provider": {
            "context_length": 32_768,
            "max_completion_tokens": 16_384,
            "is_moderated": False,
        },
        "supported_parameters": ["temperature", "max_tokens"],
    },
)


def fallback_records() -> list[OpenRouterModel]:
    """Return the bundled catalog as raw records."""
    return [OpenRouterModel.model_validate(record) for record in FALLBACK_MODELS]
