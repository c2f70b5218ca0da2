"""Client for the OpenRouter models API."""

from __future__ import annotations

import httpx
from pydantic import SecretStr, ValidationError

from llm_registry.errors import OpenRouterError
from llm_registry.logging import get_logger
from llm_registry.models.openrouter import OpenRouterModel, OpenRouterModelsResponse

logger = get_logger(__name__)


class OpenRouterClient:
    """Client for fetching the raw model catalog from OpenRouter.

    Performs a single request per call; retrying is left to the caller.
    """

    def __init__(
        self,
        base_url: str = "https://openrouter.ai/api/v1",
        api_key: SecretStr | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the OpenRouter client.

        Args:
            base_url: OpenRouter API base URL.
            api_key: Optional API key; the models endpoint is public.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        if self.api_key is None:
            return {}
        return {"Authorization": f"Bearer {self.api_key.get_secret_value()}"}

    async def fetch_models(self) -> list[OpenRouterModel]:
        """Fetch raw model records from OpenRouter.

        Returns:
            Validated raw records. Records that fail validation are skipped.

        Raises:
            OpenRouterError: If the request fails or the body is not a models list.
        """
        url = f"{self.base_url}/models"

        logger.info("Fetching models from OpenRouter", url=url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers=self._headers())
                response.raise_for_status()
                body = OpenRouterModelsResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            raise OpenRouterError(
                f"HTTP error: {e.response.status_code}",
                retryable=e.response.status_code >= 500,
            ) from e
        except httpx.RequestError as e:
            raise OpenRouterError(f"Request failed: {e}", retryable=True) from e
        except (ValueError, ValidationError) as e:
            raise OpenRouterError(f"Invalid response body: {e}") from e

        logger.info("Received models from OpenRouter", count=len(body.data))

        models: list[OpenRouterModel] = []
        for index, raw in enumerate(body.data):
            try:
                models.append(OpenRouterModel.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid OpenRouter record",
                    index=index,
                    model_id=raw.get("id"),
                    error=str(e),
                )

        return models
