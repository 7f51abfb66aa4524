"""Abstract embedding provider interface."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Interface for text embedding generation.

    Implementations wrap a specific embedding backend (OpenAI, a local
    sentence-transformers model). Documents and queries must go through the
    same provider so their vectors live in the same space.
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a batch of text strings.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input, each of length
            ``dimension``.

        Raises:
            ValueError: If texts is empty.
            EmbeddingError: If the backend call fails.
        """
        ...

    def embed_query(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for query texts.

        Override to add model-specific query preprocessing. Default delegates
        to embed().
        """
        return self.embed(texts)

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimension (e.g., 1536)."""
        ...
