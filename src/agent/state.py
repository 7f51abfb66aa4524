"""Query state definition for the LangGraph workflow."""

from typing import TypedDict

from src.agent.stages import StageResult
from src.errors import PipelineError
from src.models.enums import PipelineStage
from src.models.query import QueryContext, QueryRequest


class QueryState(TypedDict, total=False):
    """State object passed through the LangGraph workflow."""
    request: QueryRequest
    stage: PipelineStage  # last state reached
    last_result: StageResult  # outcome of the most recent node, drives routing
    transcription: str | None
    context: QueryContext | None
    raw_response: str | None
    scratchpad: str | None
    answer: str | None
    audio: bytes | None
    error: PipelineError | None
