"""Document Chunk data model."""

from dataclasses import dataclass, field


def chunk_id(source: str, chunk_index: int) -> str:
    """Deterministic record id, so re-ingesting a document overwrites its chunks."""
    return f"{source}-chunk-{chunk_index}"


@dataclass
class DocumentChunk:
    """A character window of a source document sized for embedding and retrieval."""

    source: str
    chunk_text: str
    chunk_index: int
    start: int
    page_number: int = 0
    embedding: list[float] = field(default_factory=list)

    def __post_init__(self):
        if not self.chunk_text:
            raise ValueError("chunk_text must not be empty")
        if self.chunk_index < 0:
            raise ValueError("chunk_index must be >= 0")
        if self.start < 0:
            raise ValueError("start must be >= 0")
        if self.page_number < 0:
            raise ValueError("page_number must be >= 0")

    @property
    def id(self) -> str:
        return chunk_id(self.source, self.chunk_index)

    @property
    def end(self) -> int:
        return self.start + len(self.chunk_text)
