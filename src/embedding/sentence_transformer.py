"""Local sentence-transformers embedding provider."""

import logging
import os

from sentence_transformers import SentenceTransformer

from src.embedding.provider import EmbeddingProvider
from src.errors import EmbeddingError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "all-MiniLM-L6-v2"


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Runs a sentence-transformers model in process.

    Default model: all-MiniLM-L6-v2 (384 dimensions, ~80MB). Useful for
    offline ingestion, or when documents must not leave the machine.
    Vectors are L2-normalized so cosine distances in the index stay
    comparable across chunk lengths.
    """

    def __init__(self, model_name: str = DEFAULT_MODEL, batch_size: int = 32):
        saved_verbosity = os.environ.get("TRANSFORMERS_VERBOSITY")
        os.environ["TRANSFORMERS_VERBOSITY"] = "error"
        try:
            try:
                model = SentenceTransformer(model_name, local_files_only=True)
            except OSError:
                logger.info("%s is not in the local cache, downloading", model_name)
                model = SentenceTransformer(model_name)
        except Exception as e:
            raise EmbeddingError(f"Could not load embedding model '{model_name}': {e}") from e
        finally:
            if saved_verbosity is None:
                os.environ.pop("TRANSFORMERS_VERBOSITY", None)
            else:
                os.environ["TRANSFORMERS_VERBOSITY"] = saved_verbosity
        self._model = model
        self._model_name = model_name
        self._batch_size = batch_size
        self._dimension = model.get_sentence_embedding_dimension()

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts must not be empty")
        try:
            vectors = self._model.encode(
                texts,
                batch_size=self._batch_size,
                normalize_embeddings=True,
                show_progress_bar=False,
            )
        except Exception as e:
            raise EmbeddingError(f"{self._model_name} failed to encode {len(texts)} texts: {e}") from e
        return vectors.tolist()

    @property
    def dimension(self) -> int:
        return self._dimension
