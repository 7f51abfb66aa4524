"""Query, answer and ingestion result data models."""

from dataclasses import dataclass, field

from src.errors import PipelineError
from src.models.enums import ContextStatus, PipelineStage


@dataclass
class QueryRequest:
    """A spoken or typed question.

    When both audio and question are given, the question text wins and the
    audio is not transcribed.
    """

    audio: bytes | None = None
    question: str | None = None
    audio_filename: str = "question.webm"
    speak: bool = True

    def __post_init__(self):
        if not self.audio and not (self.question and self.question.strip()):
            raise ValueError("either audio or question must be provided")


@dataclass
class QueryContext:
    """Retrieved passages joined into the block injected into the prompt."""

    text: str
    status: ContextStatus
    matches: list = field(default_factory=list)

    def __post_init__(self):
        if not isinstance(self.status, ContextStatus):
            self.status = ContextStatus(self.status)


@dataclass
class ParsedResponse:
    scratchpad: str
    answer: str


@dataclass
class QueryResult:
    """Everything the orchestrator produced for one request.

    Fields computed before a fatal failure are kept so the caller can show
    them alongside the error.
    """

    stage: PipelineStage
    transcription: str | None = None
    answer: str | None = None
    scratchpad: str | None = None
    audio: bytes | None = None
    error: PipelineError | None = None
    context_status: ContextStatus | None = None

    @property
    def failed(self) -> bool:
        return self.stage == PipelineStage.FAILED

    def to_dict(self) -> dict:
        """Caller-facing shape: transcription, answer, scratchpad, audio?, error?"""
        payload = {
            "transcription": self.transcription,
            "answer": self.answer,
            "scratchpad": self.scratchpad,
        }
        if self.audio is not None:
            payload["audio"] = self.audio
        if self.error is not None:
            payload["error"] = {"stage": self.error.stage, "message": self.error.message}
        return payload


@dataclass
class IngestionResult:
    source: str
    chunks_indexed: int = 0
    error: PipelineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
