"""Vector index interface and record types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from src.models.chunk import DocumentChunk


@dataclass
class IndexRecord:
    """One embedded chunk as written to the index."""

    id: str
    vector: list[float]
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: DocumentChunk) -> "IndexRecord":
        return cls(
            id=chunk.id,
            vector=chunk.embedding,
            metadata={
                "text": chunk.chunk_text,
                "source": chunk.source,
                "pageNumber": chunk.page_number,
                "chunkIndex": chunk.chunk_index,
            },
        )


@dataclass
class IndexMatch:
    """A nearest-neighbour hit. score is a similarity in [0, 1], higher is closer."""

    id: str
    text: str
    score: float
    metadata: dict = field(default_factory=dict)


class VectorIndex(ABC):
    """Interface for similarity search over embedded chunks.

    Implementations treat record ids as primary keys: upserting an existing
    id replaces the stored vector and metadata.
    """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Vector length this index accepts."""
        ...

    @abstractmethod
    def upsert(self, records: list[IndexRecord]) -> None:
        """Insert or replace records.

        Raises:
            VectorIndexError: If the backend rejects the write.
        """
        ...

    @abstractmethod
    def query(self, vector: list[float], k: int) -> list[IndexMatch]:
        """Return up to k matches ordered by descending score.

        Raises:
            VectorIndexError: If the backend query fails.
        """
        ...

    @abstractmethod
    def delete_document(self, source: str) -> None:
        """Remove every record whose metadata source equals source."""
        ...

    @property
    @abstractmethod
    def count(self) -> int:
        ...
