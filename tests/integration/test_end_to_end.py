"""Integration test for ingest → ask against a real ChromaDB index.

Embedding, transcription, generation and synthesis are deterministic fakes;
chunking, indexing, retrieval and the LangGraph workflow are the real ones.
"""

import uuid

import pytest

from src.agent.graph import QueryOrchestrator
from src.ingestion.ingestor import Ingestor
from src.models.enums import ContextStatus, PipelineStage
from src.models.query import QueryRequest
from src.retrieval.retriever import CONTEXT_SEPARATOR, Retriever
from src.vectorstore.chroma_store import ChromaStore
from tests.fakes import (
    KeywordEmbeddingProvider,
    ScriptedGenerator,
    ScriptedSynthesizer,
    ScriptedTranscriber,
)

VOCAB = ["loan", "bond", "cash", "debt"]

# Four 800-character topic regions plus a short tail: 3299 characters after
# loading, which chunks into 4 pieces at size 1000 / overlap 200.
PRIMER = ("loan " * 160 + "bond " * 160 + "cash " * 160 + "debt " * 160 + "zero " * 20).encode()


@pytest.fixture
def provider():
    return KeywordEmbeddingProvider(VOCAB)


@pytest.fixture
def store(provider):
    return ChromaStore(
        path=":memory:",
        dimension=provider.dimension,
        collection_name=f"e2e-{uuid.uuid4().hex}",
    )


@pytest.fixture
def ingested_store(provider, store):
    result = Ingestor(provider, store, chunk_size=1000, chunk_overlap=200).ingest_file(PRIMER, "primer.txt")
    assert result.ok
    return store


class TestIngestThenAsk:
    def test_ingestion_writes_four_chunks(self, ingested_store):
        assert ingested_store.count == 4
        stored = ingested_store._collection.get(where={"source": "primer.txt"})
        assert sorted(stored["ids"]) == [f"primer.txt-chunk-{i}" for i in range(4)]
        by_id = dict(zip(stored["ids"], stored["documents"]))
        assert by_id["primer.txt-chunk-2"].startswith("cash cash")

    def test_reingesting_keeps_count(self, provider, ingested_store):
        Ingestor(provider, ingested_store).ingest_file(PRIMER, "primer.txt")
        assert ingested_store.count == 4

    def test_cash_question_retrieves_cash_chunk_first(self, provider, ingested_store):
        result = Retriever(provider, ingested_store).retrieve("How does cash work?", k=2)
        assert result.value.status == ContextStatus.FOUND
        assert result.value.matches[0].id == "primer.txt-chunk-2"
        first = result.value.text.split(CONTEXT_SEPARATOR)[0]
        assert first.startswith("cash cash")

    def test_spoken_question_end_to_end(self, provider, ingested_store):
        generator = ScriptedGenerator(
            "<scratchpad>The context is about cash.</scratchpad>### Cash is the most liquid asset."
        )
        synthesizer = ScriptedSynthesizer(audio=b"ID3-answer")
        orchestrator = QueryOrchestrator(
            transcriber=ScriptedTranscriber(text="How does cash work?"),
            retriever=Retriever(provider, ingested_store),
            generator=generator,
            synthesizer=synthesizer,
            top_k=2,
        )

        result = orchestrator.answer(QueryRequest(audio=b"webm-bytes"))

        assert result.stage == PipelineStage.SYNTHESIZED
        assert result.transcription == "How does cash work?"
        assert result.answer == "Cash is the most liquid asset."
        assert result.scratchpad == "<scratchpad>The context is about cash.</scratchpad>"
        assert result.audio == b"ID3-answer"
        assert generator.prompts[0].context.startswith("cash cash")
        assert generator.prompts[0].context.count(CONTEXT_SEPARATOR) == 1

    def test_forgotten_document_is_no_longer_retrieved(self, provider, ingested_store):
        ingested_store.delete_document("primer.txt")
        result = Retriever(provider, ingested_store).retrieve("cash")
        assert result.value.status == ContextStatus.NO_MATCHES
