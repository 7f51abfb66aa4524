"""Query-time retrieval: embed the question, fetch top-K chunks, build the context block.

Retrieval enriches the prompt but is not required to answer, so every
failure here degrades to a marker string instead of failing the request.
"""

import logging

from src.agent.stages import Degraded, Ok, StageResult, call_with_timeout
from src.embedding.provider import EmbeddingProvider
from src.errors import InvalidConfig
from src.models.enums import ContextStatus
from src.models.query import QueryContext
from src.vectorstore.index import VectorIndex

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"
NO_RELEVANT_CONTEXT = "No relevant context found."
CONTEXT_UNAVAILABLE = "Error retrieving context from knowledge base."
DEFAULT_TOP_K = 5


class Retriever:
    """Embeds a query and assembles the nearest chunks into a QueryContext."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        index: VectorIndex,
        separator: str = CONTEXT_SEPARATOR,
        timeout: float | None = None,
    ):
        if embedding_provider.dimension != index.dimension:
            raise InvalidConfig(
                f"Embedding dimension {embedding_provider.dimension} does not match "
                f"index dimension {index.dimension}"
            )
        self._embedding_provider = embedding_provider
        self._index = index
        self._separator = separator
        self._timeout = timeout

    def retrieve(self, query_text: str, k: int = DEFAULT_TOP_K) -> StageResult:
        """Return Ok(QueryContext) or Degraded(QueryContext, reason). Never raises."""
        try:
            vector = call_with_timeout(
                self._embedding_provider.embed_query, [query_text], timeout=self._timeout
            )[0]
        except Exception as e:
            logger.warning("Query embedding failed, answering without context: %s", e)
            return self._unavailable(f"embedding failed: {e}")

        try:
            matches = call_with_timeout(self._index.query, vector, k, timeout=self._timeout)
        except Exception as e:
            logger.warning("Vector index query failed, answering without context: %s", e)
            return self._unavailable(f"index query failed: {e}")

        matches = sorted((m for m in matches if m.text), key=lambda m: m.score, reverse=True)
        texts = [m.text for m in matches]
        if not texts:
            logger.info("No matches for query: %r", query_text)
            return Degraded(
                QueryContext(text=NO_RELEVANT_CONTEXT, status=ContextStatus.NO_MATCHES),
                reason="no matches",
            )

        logger.info("Retrieved %d chunks for query: %r", len(texts), query_text)
        return Ok(QueryContext(
            text=self._separator.join(texts),
            status=ContextStatus.FOUND,
            matches=matches,
        ))

    @staticmethod
    def _unavailable(reason: str) -> Degraded:
        return Degraded(
            QueryContext(text=CONTEXT_UNAVAILABLE, status=ContextStatus.UNAVAILABLE),
            reason=reason,
        )
