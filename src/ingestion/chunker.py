"""Fixed-size character chunker with overlap and page metadata."""

from src.errors import InvalidConfig
from src.models.chunk import DocumentChunk
from src.models.document import SourceDocument


def validate_chunking(chunk_size: int, chunk_overlap: int) -> None:
    """Raise InvalidConfig unless chunk_size > chunk_overlap >= 0."""
    if chunk_size <= 0:
        raise InvalidConfig(f"chunk_size must be > 0, got {chunk_size}")
    if chunk_overlap < 0:
        raise InvalidConfig(f"chunk_overlap must be >= 0, got {chunk_overlap}")
    if chunk_overlap >= chunk_size:
        raise InvalidConfig(
            f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})"
        )


def chunk_spans(text: str, chunk_size: int, chunk_overlap: int) -> list[tuple[int, int]]:
    """Return (start, end) offsets of each window over text.

    Windows advance by chunk_size - chunk_overlap and stop at the first one
    that reaches the end of the text, so every chunk but the last is exactly
    chunk_size characters long.
    """
    validate_chunking(chunk_size, chunk_overlap)
    step = chunk_size - chunk_overlap
    spans = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        spans.append((start, end))
        if end == len(text):
            break
        start += step
    return spans


def chunk_text(text: str, chunk_size: int, chunk_overlap: int) -> list[str]:
    """Split text into overlapping fixed-size windows."""
    return [text[start:end] for start, end in chunk_spans(text, chunk_size, chunk_overlap)]


def chunk_document(
    document: SourceDocument,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
) -> list[DocumentChunk]:
    """Split a document into chunks carrying index, offset and page metadata.

    A chunk's page is the page its first character falls on.
    """
    return [
        DocumentChunk(
            source=document.source,
            chunk_text=document.text[start:end],
            chunk_index=idx,
            start=start,
            page_number=document.page_number_at(start),
        )
        for idx, (start, end) in enumerate(
            chunk_spans(document.text, chunk_size, chunk_overlap)
        )
    ]
