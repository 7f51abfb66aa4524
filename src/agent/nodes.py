"""Graph nodes for the spoken question → spoken answer workflow.

Each node performs one transition, returns the fields it produced plus a
tagged ``last_result`` for the router, and never raises: failures become
``Fatal`` or ``Degraded`` results.
"""

import logging

from src.agent.prompt import compose
from src.agent.response_parser import parse_response
from src.agent.stages import Degraded, Fatal, Ok, call_with_timeout
from src.agent.state import QueryState
from src.errors import GenerationFailure, SynthesisFailure, TranscriptionFailure
from src.llm.generator import Generator
from src.models.enums import PipelineStage
from src.retrieval.retriever import DEFAULT_TOP_K, Retriever
from src.speech.synthesis import SpeechSynthesizer
from src.speech.transcription import Transcriber

logger = logging.getLogger(__name__)


def transcribe(
    state: QueryState,
    transcriber: Transcriber | None,
    timeout: float | None = None,
) -> dict:
    """RECEIVED → TRANSCRIBED. Typed questions skip the transcription call."""
    request = state["request"]

    if request.question and request.question.strip():
        question = request.question.strip()
        return {
            "transcription": question,
            "stage": PipelineStage.TRANSCRIBED,
            "last_result": Ok(question),
        }

    if transcriber is None:
        return {"last_result": Fatal(TranscriptionFailure("No transcriber configured for audio input"))}

    try:
        text = call_with_timeout(
            transcriber.transcribe, request.audio, request.audio_filename, timeout=timeout
        )
    except Exception as e:
        logger.error("Transcription failed: %s", e)
        failure = TranscriptionFailure(f"Failed to transcribe audio: {e}")
        failure.__cause__ = e
        return {"last_result": Fatal(failure)}

    text = (text or "").strip()
    if not text:
        return {"last_result": Fatal(TranscriptionFailure("Transcription produced no text"))}

    return {
        "transcription": text,
        "stage": PipelineStage.TRANSCRIBED,
        "last_result": Ok(text),
    }


def retrieve(state: QueryState, retriever: Retriever, top_k: int = DEFAULT_TOP_K) -> dict:
    """TRANSCRIBED → RETRIEVED. Always advances; missing context only degrades."""
    result = retriever.retrieve(state["transcription"], top_k)
    if isinstance(result, Degraded):
        logger.warning("Retrieval degraded (%s), prompting with marker context", result.reason)
    return {
        "context": result.value,
        "stage": PipelineStage.RETRIEVED,
        "last_result": result,
    }


def generate(state: QueryState, generator: Generator, timeout: float | None = None) -> dict:
    """RETRIEVED → GENERATED. One attempt; any failure is fatal."""
    prompt = compose(state["context"].text, state["transcription"])
    try:
        raw = call_with_timeout(generator.generate, prompt, timeout=timeout)
    except Exception as e:
        logger.error("Generation failed: %s", e)
        failure = GenerationFailure(f"Failed to get answer from AI model: {e}")
        failure.__cause__ = e
        return {"last_result": Fatal(failure)}

    if not raw or not raw.strip():
        return {"last_result": Fatal(GenerationFailure("No response content from the model"))}

    return {
        "raw_response": raw,
        "stage": PipelineStage.GENERATED,
        "last_result": Ok(raw),
    }


def parse(state: QueryState) -> dict:
    """GENERATED → PARSED."""
    parsed = parse_response(state["raw_response"])
    return {
        "scratchpad": parsed.scratchpad,
        "answer": parsed.answer,
        "stage": PipelineStage.PARSED,
        "last_result": Ok(parsed),
    }


def synthesize(
    state: QueryState,
    synthesizer: SpeechSynthesizer,
    timeout: float | None = None,
) -> dict:
    """PARSED → SYNTHESIZED. A failure keeps the textual answer and reports the error."""
    try:
        audio = call_with_timeout(synthesizer.synthesize, state["answer"], timeout=timeout)
    except Exception as e:
        logger.warning("Speech synthesis failed, returning text only: %s", e)
        failure = SynthesisFailure(f"Failed to generate speech from text: {e}")
        failure.__cause__ = e
        return {"error": failure, "last_result": Degraded(None, reason=str(e))}

    return {
        "audio": audio,
        "stage": PipelineStage.SYNTHESIZED,
        "last_result": Ok(audio),
    }


def fail(state: QueryState) -> dict:
    """Any fatal result → FAILED. Fields produced so far stay in the state."""
    error = state["last_result"].error
    logger.error("Query failed after stage %s: %s", state.get("stage"), error)
    return {"stage": PipelineStage.FAILED, "error": error}
