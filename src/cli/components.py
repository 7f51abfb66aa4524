"""Build capability clients and pipeline objects from settings.

The only place where concrete adapters are chosen; everything downstream
receives them through constructors.
"""

from config.settings import Settings
from src.agent.graph import QueryOrchestrator
from src.embedding.config import get_embedding_provider
from src.embedding.provider import EmbeddingProvider
from src.ingestion.ingestor import Ingestor
from src.llm.config import get_llm
from src.llm.generator import ChatModelGenerator
from src.retrieval.retriever import Retriever
from src.speech.synthesis import OpenAISpeechSynthesizer
from src.speech.transcription import WhisperTranscriber
from src.vectorstore.chroma_store import ChromaStore


def build_store(settings: Settings, embedding_provider: EmbeddingProvider) -> ChromaStore:
    return ChromaStore(
        path=str(settings.chroma_path),
        dimension=embedding_provider.dimension,
        collection_name=settings.finvoice_collection,
    )


def build_ingestor(settings: Settings, chunk_size: int | None = None, chunk_overlap: int | None = None) -> Ingestor:
    embedding_provider = get_embedding_provider(settings)
    return Ingestor(
        embedding_provider=embedding_provider,
        index=build_store(settings, embedding_provider),
        chunk_size=chunk_size if chunk_size is not None else settings.finvoice_chunk_size,
        chunk_overlap=chunk_overlap if chunk_overlap is not None else settings.finvoice_chunk_overlap,
        batch_size=settings.finvoice_upsert_batch_size,
        max_workers=settings.finvoice_embedding_workers,
        timeout=settings.finvoice_stage_timeout,
    )


def build_orchestrator(
    settings: Settings,
    with_transcription: bool = True,
    with_speech: bool = True,
) -> tuple[QueryOrchestrator, ChromaStore]:
    """Return the orchestrator plus its store (for empty-corpus checks).

    Speech clients are only built when asked for, so typed questions work
    without OpenAI credentials when the LLM and embeddings run elsewhere.
    """
    embedding_provider = get_embedding_provider(settings)
    store = build_store(settings, embedding_provider)
    retriever = Retriever(embedding_provider, store, timeout=settings.finvoice_stage_timeout)

    transcriber = None
    if with_transcription:
        transcriber = WhisperTranscriber(
            api_key=settings.openai_api_key,
            model=settings.finvoice_transcription_model,
            timeout=settings.finvoice_stage_timeout,
        )

    synthesizer = None
    if with_speech:
        synthesizer = OpenAISpeechSynthesizer(
            api_key=settings.openai_api_key,
            model=settings.finvoice_tts_model,
            voice=settings.finvoice_tts_voice,
            audio_format=settings.finvoice_tts_format,
            timeout=settings.finvoice_stage_timeout,
        )

    orchestrator = QueryOrchestrator(
        transcriber=transcriber,
        retriever=retriever,
        generator=ChatModelGenerator(get_llm(settings)),
        synthesizer=synthesizer,
        top_k=settings.finvoice_top_k,
        timeout=settings.finvoice_stage_timeout,
    )
    return orchestrator, store
