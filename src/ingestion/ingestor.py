"""Ingestion pipeline: document → chunks → embeddings → vector index.

Wires together: loader → chunker → embedding provider → vector index.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from src.agent.stages import call_with_timeout
from src.embedding.provider import EmbeddingProvider
from src.errors import (
    DocumentUnreadable,
    EmbeddingFailure,
    ExtractionError,
    IndexWriteFailure,
    InvalidConfig,
    PipelineError,
)
from src.ingestion.chunker import chunk_document, validate_chunking
from src.ingestion.loaders import DocumentLoader, LoaderRegistry
from src.models.chunk import DocumentChunk
from src.models.document import SourceDocument
from src.models.query import IngestionResult
from src.vectorstore.index import IndexRecord, VectorIndex

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100


class Ingestor:
    """Turns one document into indexed, retrievable chunks.

    All chunks are embedded before anything is written, so an embedding
    failure leaves the index untouched. Upserts are batched; a batch that
    fails after earlier batches were committed is reported with the counts
    already written, since those records are already retrievable.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        index: VectorIndex,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_workers: int = 1,
        timeout: float | None = None,
        loader: DocumentLoader | None = None,
    ):
        validate_chunking(chunk_size, chunk_overlap)
        if batch_size <= 0:
            raise InvalidConfig(f"batch_size must be > 0, got {batch_size}")
        if max_workers <= 0:
            raise InvalidConfig(f"max_workers must be > 0, got {max_workers}")
        if embedding_provider.dimension != index.dimension:
            raise InvalidConfig(
                f"Embedding dimension {embedding_provider.dimension} does not match "
                f"index dimension {index.dimension}"
            )
        self._embedding_provider = embedding_provider
        self._index = index
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._batch_size = batch_size
        self._max_workers = max_workers
        self._timeout = timeout
        self._loader = loader or LoaderRegistry()

    def ingest(self, document: SourceDocument, replace: bool = False) -> int:
        """Chunk, embed and index a document.

        Args:
            document: Extracted document text.
            replace: Delete the source's existing records first, so a
                shorter re-upload leaves no stale chunks behind.

        Returns:
            Number of chunks written to the index.

        Raises:
            DocumentUnreadable: The document has no text.
            EmbeddingFailure: Any chunk failed to embed; nothing was written.
            IndexWriteFailure: An upsert batch failed; earlier batches stay.
        """
        if not document.text.strip():
            raise DocumentUnreadable(f"No content extracted from {document.source}")

        chunks = chunk_document(
            document, chunk_size=self._chunk_size, chunk_overlap=self._chunk_overlap
        )
        self._embed_chunks(chunks)
        records = [IndexRecord.from_chunk(chunk) for chunk in chunks]

        if replace:
            try:
                self._index.delete_document(document.source)
            except Exception as e:
                raise IndexWriteFailure(
                    f"Could not remove previous chunks of {document.source}: {e}"
                ) from e

        written = self._upsert_batches(records, document.source)
        logger.info("Indexed %s: %d chunks", document.source, written)
        return written

    def ingest_file(self, raw: bytes, name: str, replace: bool = False) -> IngestionResult:
        """Ingestion entry point for an uploaded file.

        Per-document failures are returned on the result. InvalidConfig
        still propagates since no other document would fare better.
        """
        try:
            try:
                document = self._loader.load(raw, name)
            except ExtractionError as e:
                raise DocumentUnreadable(f"Could not extract text from {name}: {e}") from e
            return IngestionResult(source=name, chunks_indexed=self.ingest(document, replace=replace))
        except InvalidConfig:
            raise
        except IndexWriteFailure as e:
            logger.error("Partially indexed %s: %s", name, e)
            return IngestionResult(source=name, chunks_indexed=e.records_written, error=e)
        except PipelineError as e:
            logger.error("Failed to ingest %s: %s", name, e)
            return IngestionResult(source=name, error=e)

    def _embed_one(self, chunk: DocumentChunk) -> list[float]:
        vectors = call_with_timeout(
            self._embedding_provider.embed, [chunk.chunk_text], timeout=self._timeout
        )
        vector = vectors[0]
        if len(vector) != self._index.dimension:
            raise InvalidConfig(
                f"Embedding for {chunk.id} has dimension {len(vector)}, "
                f"index expects {self._index.dimension}"
            )
        return vector

    def _embed_chunks(self, chunks: list[DocumentChunk]) -> None:
        """Embed every chunk in place, keeping results in chunk-index order."""
        try:
            if self._max_workers == 1:
                vectors = [self._embed_one(chunk) for chunk in chunks]
            else:
                with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                    vectors = list(pool.map(self._embed_one, chunks))
        except InvalidConfig:
            raise
        except Exception as e:
            raise EmbeddingFailure(f"Failed to generate embeddings: {e}") from e

        for chunk, vector in zip(chunks, vectors):
            chunk.embedding = vector

    def _upsert_batches(self, records: list[IndexRecord], source: str) -> int:
        batches_written = 0
        records_written = 0
        for i in range(0, len(records), self._batch_size):
            batch = records[i:i + self._batch_size]
            try:
                call_with_timeout(self._index.upsert, batch, timeout=self._timeout)
            except InvalidConfig:
                raise
            except Exception as e:
                raise IndexWriteFailure(
                    f"Failed to save embeddings for {source} after "
                    f"{batches_written} batch(es): {e}",
                    batches_written=batches_written,
                    records_written=records_written,
                ) from e
            batches_written += 1
            records_written += len(batch)
        return records_written
