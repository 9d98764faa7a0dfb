"""OpenRouter embedding adapter — calls the /embeddings endpoint.

Retries are not handled here; EmbeddingService wraps every call in the
retry policy.
"""

import logging

import httpx

from mentor.application.interfaces.embedding_provider import EmbeddingProvider
from mentor.domain.exceptions import EmbeddingProviderError
from mentor.infrastructure.openrouter.http_adapter import (
    DEFAULT_APP_NAME,
    DEFAULT_BASE_URL,
    OpenRouterHttpAdapter,
)

logger = logging.getLogger(__name__)

_ERROR_BODY_LIMIT = 500


class OpenRouterEmbeddingProvider(OpenRouterHttpAdapter, EmbeddingProvider):
    """Infrastructure adapter — one text in, one vector out."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        app_name: str = DEFAULT_APP_NAME,
        model: str = "google/gemini-embedding-001",
        model_dimensions: int = 768,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, base_url, app_name, http_client, purpose="embedding generation")
        self._model = model
        self._dimensions = model_dimensions

    @property
    def model(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _transport_error(self, error: httpx.HTTPError) -> Exception:
        return EmbeddingProviderError(self.provider_name, f"Request failed: {error}")

    async def embed(self, text: str) -> list[float]:
        response = await self._post(
            "embeddings",
            {"model": self._model, "input": [text], "dimensions": self._dimensions},
        )
        if response.status_code != 200:
            raise EmbeddingProviderError(
                self.provider_name,
                response.text[:_ERROR_BODY_LIMIT],
                status_code=response.status_code,
            )
        return self._first_vector(response)

    def _first_vector(self, response: httpx.Response) -> list[float]:
        """Pull ``data[0].embedding`` out of an OpenAI-style response body."""
        try:
            vector = response.json()["data"][0]["embedding"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise EmbeddingProviderError(
                self.provider_name, f"Malformed embedding response: {e!r}"
            ) from e

        if not isinstance(vector, list) or not vector:
            raise EmbeddingProviderError(self.provider_name, "Embedding response carried no vector")

        logger.debug("Generated embedding (model=%s, dims=%d)", self._model, len(vector))
        return vector
