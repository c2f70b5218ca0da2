"""Known model vendors, matched against the prefix of a model id."""

from __future__ import annotations

from llm_registry.models.registry import ModelProvider

OPENAI = ModelProvider(id="openai", name="OpenAI", color="#10A37F")
ANTHROPIC = ModelProvider(id="anthropic", name="Anthropic", color="#D97757")
GOOGLE = ModelProvider(id="google", name="Google", color="#4285F4")
META = ModelProvider(id="meta", name="Meta", color="#0866FF")
MISTRAL = ModelProvider(id="mistral", name="Mistral AI", color="#FA520F")
DEEPSEEK = ModelProvider(id="deepseek", name="DeepSeek", color="#4D6BFE")
QWEN = ModelProvider(id="qwen", name="Qwen", color="#615CED")
XAI = ModelProvider(id="x-ai", name="xAI", color="#000000")
COHERE = ModelProvider(id="cohere", name="Cohere", color="#39594D")
MICROSOFT = ModelProvider(id="microsoft", name="Microsoft", color="#00A4EF")
NVIDIA = ModelProvider(id="nvidia", name="NVIDIA", color="#76B900")
AMAZON = ModelProvider(id="amazon", name="Amazon", color="#FF9900")
PERPLEXITY = ModelProvider(id="perplexity", name="Perplexity", color="#20808D")
MOONSHOT = ModelProvider(id="moonshotai", name="Moonshot AI", color="#16191E")
NOUS = ModelProvider(id="nousresearch", name="Nous Research", color="#E11D48")

UNKNOWN_PROVIDER = ModelProvider(id="unknown", name="Unknown", color="#6B7280")

# Checked in order, first match wins. Several upstream vendor prefixes
# can map to the same provider.
KNOWN_PROVIDERS: tuple[tuple[str, ModelProvider], ...] = (
    ("openai", OPENAI),
    ("anthropic", ANTHROPIC),
    ("google", GOOGLE),
    ("meta-llama", META),
    ("meta", META),
    ("mistralai", MISTRAL),
    ("mistral", MISTRAL),
    ("deepseek", DEEPSEEK),
    ("qwen", QWEN),
    ("x-ai", XAI),
    ("cohere", COHERE),
    ("microsoft", MICROSOFT),
    ("nvidia", NVIDIA),
    ("amazon", AMAZON),
    ("perplexity", PERPLEXITY),
    ("moonshotai", MOONSHOT),
    ("nousresearch", NOUS),
)


def resolve_provider(model_id: str) -> ModelProvider:
    """Find the provider for a model id such as ``"openai/gpt-4o"``.

    Only the vendor segment (before the first ``/``) is compared, so
    ``"openai-compat/foo"`` does not match ``openai``.

    Args:
        model_id: Upstream model identifier.

    Returns:
        The matching provider, or ``UNKNOWN_PROVIDER``.
    """
    vendor = model_id.split("/", 1)[0].strip().lower()
    for prefix, provider in KNOWN_PROVIDERS:
        if vendor == prefix:
            return provider
    return UNKNOWN_PROVIDER
