"""Error taxonomy for the FinVoice pipeline.

Two families live here:

- ``CapabilityError`` subclasses are raised by the adapters around external
  services (OpenAI, ChromaDB, sentence-transformers, document parsers) so the
  core never has to know a vendor's exception types.
- ``PipelineError`` subclasses are raised or reported by the core stages.
  Transcription and generation failures are fatal to a query; synthesis
  failures are reported next to a usable textual answer.
"""


class CapabilityError(Exception):
    """An external capability call failed."""


class ExtractionError(CapabilityError):
    """Text could not be extracted from a raw document file."""


class EmbeddingError(CapabilityError):
    """The embedding backend failed to produce a vector."""


class VectorIndexError(CapabilityError):
    """The vector index rejected an upsert, query or delete."""


class TranscriptionError(CapabilityError):
    """Speech-to-text failed."""


class GenerationError(CapabilityError):
    """The generative model call failed or returned nothing."""


class SynthesisError(CapabilityError):
    """Text-to-speech failed."""


class PipelineError(Exception):
    """Base class for failures reported by a pipeline stage."""

    stage = "pipeline"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class InvalidConfig(PipelineError, ValueError):
    """Static misconfiguration (chunk sizes, embedding dimensions).

    Raised at construction time; never worth retrying.
    """

    stage = "config"


class DocumentUnreadable(PipelineError):
    stage = "extraction"


class EmbeddingFailure(PipelineError):
    stage = "embedding"


class IndexWriteFailure(PipelineError):
    """Upsert failed part way through a document.

    Batches already written stay visible to retrieval, so the counts are
    reported for the caller to decide between retrying and accepting a
    partially indexed document.
    """

    stage = "index"

    def __init__(self, message: str, batches_written: int = 0, records_written: int = 0):
        super().__init__(message)
        self.batches_written = batches_written
        self.records_written = records_written


class TranscriptionFailure(PipelineError):
    stage = "transcription"


class GenerationFailure(PipelineError):
    stage = "generation"


class SynthesisFailure(PipelineError):
    stage = "synthesis"


class DocumentTooLarge(PipelineError):
    """The uploaded file exceeds the configured size limit; it was not read."""

    stage = "upload"
