"""Application configuration management."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """FinVoice application settings loaded from environment variables."""

    # Required
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # LLM
    finvoice_llm_provider: str = "openai"
    finvoice_llm_model: str = "gpt-4o"

    # Embedding
    finvoice_embedding_provider: str = "openai"
    finvoice_embedding_model: str = "text-embedding-3-small"
    finvoice_local_embedding_model: str = "all-MiniLM-L6-v2"

    # Storage
    finvoice_chroma_path: str = "./data/chroma"
    finvoice_collection: str = "finance-index"

    # Ingestion
    finvoice_chunk_size: int = 1000
    finvoice_chunk_overlap: int = 200
    finvoice_upsert_batch_size: int = 100
    finvoice_embedding_workers: int = 1
    finvoice_max_document_mb: int = 20

    # Retrieval
    finvoice_top_k: int = 5

    # Speech
    finvoice_transcription_model: str = "whisper-1"
    finvoice_tts_model: str = "tts-1"
    finvoice_tts_voice: str = "alloy"
    finvoice_tts_format: str = "mp3"
    finvoice_max_audio_mb: int = 10

    # Seconds allowed for each external call before the stage counts as failed
    finvoice_stage_timeout: float = 60.0

    @property
    def chroma_path(self) -> Path:
        return Path(self.finvoice_chroma_path)

    @property
    def max_document_bytes(self) -> int:
        return self.finvoice_max_document_mb * 1024 * 1024

    @property
    def max_audio_bytes(self) -> int:
        return self.finvoice_max_audio_mb * 1024 * 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Load settings from the environment and .env."""
    return Settings()
