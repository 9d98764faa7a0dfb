"""Embedding service — provider calls wrapped in the retry policy.

Used for one-off query embedding inside search and for bulk re-indexing of
the knowledge base (one call per chunk).
"""

import logging

from mentor.application.interfaces.embedding_provider import EmbeddingProvider
from mentor.application.services.retry_policy import RetryPolicy
from mentor.domain.exceptions import EmbeddingRetriesExhaustedError, RetryExhaustedError

logger = logging.getLogger(__name__)


class EmbeddingService:
    """Application service that embeds text with bounded retry."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        retry_policy: RetryPolicy | None = None,
    ):
        self._provider = embedding_provider
        self._retry_policy = retry_policy or RetryPolicy()

    @property
    def provider(self) -> EmbeddingProvider:
        return self._provider

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    async def embed(self, text: str) -> list[float]:
        """Return the provider's vector for ``text``.

        Raises:
            EmbeddingRetriesExhaustedError: When every attempt failed.
        """
        try:
            return await self._retry_policy.run(
                lambda: self._provider.embed(text),
                description="Embedding API call",
            )
        except RetryExhaustedError as exc:
            raise EmbeddingRetriesExhaustedError(
                "Embedding API call", exc.attempts, exc.last_error
            ) from exc.last_error
