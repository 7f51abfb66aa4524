"""Embedding provider selection from settings."""

from config.settings import Settings, get_settings
from src.embedding.provider import EmbeddingProvider


def get_embedding_provider(settings: Settings | None = None) -> EmbeddingProvider:
    """Create the configured embedding provider.

    Default: OpenAI text-embedding-3-small. "sentence-transformers" runs
    FINVOICE_LOCAL_EMBEDDING_MODEL in process instead.
    """
    settings = settings or get_settings()
    provider = settings.finvoice_embedding_provider.lower()

    if provider == "openai":
        from src.embedding.openai_provider import OpenAIEmbeddingProvider

        return OpenAIEmbeddingProvider(
            api_key=settings.openai_api_key,
            model_name=settings.finvoice_embedding_model,
            timeout=settings.finvoice_stage_timeout,
        )
    elif provider in ("sentence-transformers", "sentence_transformers", "local"):
        from src.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider

        return SentenceTransformerEmbeddingProvider(settings.finvoice_local_embedding_model)
    else:
        raise ValueError(
            f"Unsupported embedding provider: {provider}. "
            "Supported: 'openai', 'sentence-transformers'"
        )
