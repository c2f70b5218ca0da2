"""Exceptions raised by the model registry."""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for registry errors."""


class MalformedPricingError(RegistryError):
    """A pricing field could not be parsed as a non-negative number."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Malformed pricing for {field!r}: {value!r}")


class MissingIdError(RegistryError):
    """A raw model record has no id."""


class EmptyUpstreamError(RegistryError):
    """A batch produced no valid models.

    Raised instead of returning an empty registry, since an empty catalog
    usually means the upstream is broken rather than genuinely empty.
    """

    def __init__(self, source: str, rejected: int = 0) -> None:
        self.source = source
        self.rejected = rejected
        super().__init__(f"No valid models from {source} source ({rejected} rejected)")


class OpenRouterError(RegistryError):
    """Error from the OpenRouter API."""

    def __init__(self, message: str, retryable: bool = False) -> None:
        self.retryable = retryable
        super().__init__(message)


class CacheError(RegistryError):
    """Error with snapshot cache operations."""
