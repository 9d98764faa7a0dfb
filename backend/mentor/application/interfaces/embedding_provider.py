"""Abstract interface (port) for embedding generation."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Port for generating text embeddings — implemented in the infrastructure layer."""

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Generate the embedding vector for a single text.

        Args:
            text: The literal text to embed.

        Returns:
            The provider's embedding vector, verbatim.

        Raises:
            EmbeddingProviderError: If the provider call fails.
        """
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        """Identifier of the embedding model this provider calls."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Return the dimensionality of the embedding vectors produced by this provider."""
        ...
