"""OpenAI embedding provider implementation."""

import logging

from openai import OpenAI, OpenAIError

from src.embedding.provider import EmbeddingProvider
from src.errors import EmbeddingError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "text-embedding-3-small"

# Native output sizes; the v3 models can also be shortened via `dimensions`
MODEL_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embedding provider backed by the OpenAI embeddings endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str = DEFAULT_MODEL,
        dimensions: int | None = None,
        client: OpenAI | None = None,
        timeout: float | None = None,
    ):
        if dimensions is None:
            if model_name not in MODEL_DIMENSIONS:
                raise ValueError(
                    f"Unknown embedding model '{model_name}', pass dimensions explicitly"
                )
            dimensions = MODEL_DIMENSIONS[model_name]
        self._client = client or OpenAI(api_key=api_key or None, timeout=timeout, max_retries=0)
        self._model_name = model_name
        self._dimension = dimensions
        # Only send `dimensions` when shortening; ada-002 rejects the parameter
        self._request_dimensions = (
            dimensions if dimensions != MODEL_DIMENSIONS.get(model_name) else None
        )

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts must not be empty")
        kwargs = {"model": self._model_name, "input": texts}
        if self._request_dimensions is not None:
            kwargs["dimensions"] = self._request_dimensions
        try:
            response = self._client.embeddings.create(**kwargs)
        except OpenAIError as e:
            raise EmbeddingError(f"OpenAI embeddings request failed: {e}") from e
        logger.debug(
            "Embedded %d texts with %s (%d tokens)",
            len(texts), self._model_name, response.usage.total_tokens,
        )
        return [item.embedding for item in sorted(response.data, key=lambda d: d.index)]

    @property
    def dimension(self) -> int:
        return self._dimension
