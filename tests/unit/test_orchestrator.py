"""Unit tests for the query workflow.

Every capability is a scripted fake; the LangGraph wiring and routing are real.
"""

import time

import pytest

from src.agent.graph import QueryOrchestrator
from src.agent.response_parser import NO_SCRATCHPAD
from src.errors import (
    GenerationError,
    GenerationFailure,
    SynthesisError,
    SynthesisFailure,
    TranscriptionError,
    TranscriptionFailure,
)
from src.models.enums import ContextStatus, PipelineStage
from src.models.query import QueryRequest
from src.retrieval.retriever import CONTEXT_UNAVAILABLE, NO_RELEVANT_CONTEXT, Retriever
from src.vectorstore.index import IndexRecord
from tests.fakes import (
    InMemoryIndex,
    KeywordEmbeddingProvider,
    ScriptedGenerator,
    ScriptedSynthesizer,
    ScriptedTranscriber,
)

VOCAB = ["bond", "yield", "coupon", "price"]
PASSAGE = "The bond yield is the coupon divided by the bond price."


@pytest.fixture
def provider():
    return KeywordEmbeddingProvider(VOCAB)


@pytest.fixture
def retriever(provider):
    index = InMemoryIndex(dimension=provider.dimension)
    index.upsert([IndexRecord(
        id="primer.pdf-chunk-0",
        vector=provider.embed([PASSAGE])[0],
        metadata={"text": PASSAGE, "source": "primer.pdf", "pageNumber": 1, "chunkIndex": 0},
    )])
    return Retriever(provider, index)


@pytest.fixture
def audio_request():
    return QueryRequest(audio=b"RIFF....WAVEfmt ", audio_filename="q.wav")


def _orchestrator(retriever, transcriber=None, generator=None, synthesizer=None, timeout=None):
    return QueryOrchestrator(
        transcriber=transcriber or ScriptedTranscriber(),
        retriever=retriever,
        generator=generator or ScriptedGenerator(),
        synthesizer=synthesizer,
        timeout=timeout,
    )


class TestHappyPath:
    def test_spoken_question_to_spoken_answer(self, retriever, audio_request):
        generator = ScriptedGenerator("<scratchpad>yield = coupon / price</scratchpad>### About 5%.")
        synthesizer = ScriptedSynthesizer(audio=b"mp3-bytes")
        result = _orchestrator(retriever, generator=generator, synthesizer=synthesizer).answer(audio_request)

        assert result.stage == PipelineStage.SYNTHESIZED
        assert result.transcription == "What is a bond yield?"
        assert result.answer == "About 5%."
        assert result.scratchpad == "<scratchpad>yield = coupon / price</scratchpad>"
        assert result.audio == b"mp3-bytes"
        assert result.error is None
        assert result.context_status == ContextStatus.FOUND
        assert synthesizer.texts == ["About 5%."]

    def test_prompt_carries_context_and_transcription(self, retriever, audio_request):
        generator = ScriptedGenerator()
        _orchestrator(retriever, generator=generator).answer(audio_request)
        prompt = generator.prompts[0]
        assert prompt.context == PASSAGE
        assert prompt.question == "What is a bond yield?"

    def test_without_synthesizer_stops_at_parsed(self, retriever, audio_request):
        result = _orchestrator(retriever).answer(audio_request)
        assert result.stage == PipelineStage.PARSED
        assert result.audio is None
        assert result.answer == "final"

    def test_speak_false_skips_synthesis(self, retriever):
        synthesizer = ScriptedSynthesizer()
        request = QueryRequest(question="What is a coupon?", speak=False)
        result = _orchestrator(retriever, synthesizer=synthesizer).answer(request)
        assert result.stage == PipelineStage.PARSED
        assert synthesizer.texts == []

    def test_typed_question_skips_transcriber(self, retriever):
        transcriber = ScriptedTranscriber()
        request = QueryRequest(audio=b"ignored", question="  Define duration.  ")
        result = _orchestrator(retriever, transcriber=transcriber).answer(request)
        assert transcriber.calls == 0
        assert result.transcription == "Define duration."

    def test_unstructured_response_is_still_answered(self, retriever, audio_request):
        generator = ScriptedGenerator("Bonds pay coupons.")
        result = _orchestrator(retriever, generator=generator).answer(audio_request)
        assert result.answer == "Bonds pay coupons."
        assert result.scratchpad == NO_SCRATCHPAD


class TestDegradedContext:
    def test_empty_index_still_answers(self, provider, audio_request):
        retriever = Retriever(provider, InMemoryIndex(dimension=provider.dimension))
        generator = ScriptedGenerator()
        result = _orchestrator(retriever, generator=generator).answer(audio_request)
        assert result.stage == PipelineStage.PARSED
        assert result.context_status == ContextStatus.NO_MATCHES
        assert generator.prompts[0].context == NO_RELEVANT_CONTEXT

    def test_index_outage_still_answers(self, provider, audio_request):
        retriever = Retriever(provider, InMemoryIndex(dimension=provider.dimension, fail_query=True))
        generator = ScriptedGenerator()
        result = _orchestrator(retriever, generator=generator).answer(audio_request)
        assert not result.failed
        assert result.context_status == ContextStatus.UNAVAILABLE
        assert generator.prompts[0].context == CONTEXT_UNAVAILABLE


class TestFailures:
    def test_transcription_failure_is_fatal(self, retriever, audio_request):
        generator = ScriptedGenerator()
        transcriber = ScriptedTranscriber(error=TranscriptionError("unsupported codec"))
        result = _orchestrator(retriever, transcriber=transcriber, generator=generator).answer(audio_request)

        assert result.failed
        assert isinstance(result.error, TranscriptionFailure)
        assert isinstance(result.error.__cause__, TranscriptionError)
        assert result.transcription is None
        assert result.answer is None
        assert generator.prompts == []

    def test_empty_transcript_is_fatal(self, retriever, audio_request):
        result = _orchestrator(retriever, transcriber=ScriptedTranscriber(text="   ")).answer(audio_request)
        assert result.failed
        assert isinstance(result.error, TranscriptionFailure)

    def test_audio_without_transcriber_is_fatal(self, retriever, audio_request):
        orchestrator = QueryOrchestrator(
            transcriber=None, retriever=retriever, generator=ScriptedGenerator()
        )
        result = orchestrator.answer(audio_request)
        assert isinstance(result.error, TranscriptionFailure)

    def test_generation_failure_keeps_transcription(self, retriever, audio_request):
        synthesizer = ScriptedSynthesizer()
        generator = ScriptedGenerator(error=GenerationError("rate limited"))
        result = _orchestrator(retriever, generator=generator, synthesizer=synthesizer).answer(audio_request)

        assert result.stage == PipelineStage.FAILED
        assert isinstance(result.error, GenerationFailure)
        assert result.transcription == "What is a bond yield?"
        assert result.answer is None
        assert synthesizer.texts == []

    def test_blank_generation_is_fatal(self, retriever, audio_request):
        result = _orchestrator(retriever, generator=ScriptedGenerator("  ")).answer(audio_request)
        assert isinstance(result.error, GenerationFailure)

    def test_synthesis_failure_keeps_text_answer(self, retriever, audio_request):
        synthesizer = ScriptedSynthesizer(error=SynthesisError("voice quota exceeded"))
        result = _orchestrator(retriever, synthesizer=synthesizer).answer(audio_request)

        assert result.stage == PipelineStage.PARSED
        assert not result.failed
        assert result.answer == "final"
        assert result.audio is None
        assert isinstance(result.error, SynthesisFailure)

    def test_generation_timeout_is_fatal(self, retriever, audio_request):
        class SlowGenerator(ScriptedGenerator):
            def generate(self, prompt):
                time.sleep(0.5)
                return super().generate(prompt)

        result = _orchestrator(retriever, generator=SlowGenerator(), timeout=0.05).answer(audio_request)
        assert isinstance(result.error, GenerationFailure)
        assert "timed out" in result.error.message


class TestResultShape:
    def test_to_dict_omits_absent_audio_and_error(self, retriever, audio_request):
        payload = _orchestrator(retriever).answer(audio_request).to_dict()
        assert set(payload) == {"transcription", "answer", "scratchpad"}

    def test_to_dict_reports_error_stage(self, retriever, audio_request):
        transcriber = ScriptedTranscriber(error=TranscriptionError("bad audio"))
        payload = _orchestrator(retriever, transcriber=transcriber).answer(audio_request).to_dict()
        assert payload["error"]["stage"] == "transcription"

    def test_each_answer_starts_from_fresh_state(self, retriever):
        orchestrator = _orchestrator(retriever)
        first = orchestrator.answer(QueryRequest(question="What is a bond?"))
        second = orchestrator.answer(QueryRequest(question="What is a coupon?"))
        assert first.transcription == "What is a bond?"
        assert second.transcription == "What is a coupon?"


class TestQueryRequest:
    def test_requires_audio_or_question(self):
        with pytest.raises(ValueError):
            QueryRequest()

    def test_blank_question_without_audio_is_rejected(self):
        with pytest.raises(ValueError):
            QueryRequest(question="   ")
