"""LLM provider configuration using LangChain abstractions."""

from langchain_core.language_models.chat_models import BaseChatModel

from config.settings import Settings, get_settings


def get_llm(settings: Settings | None = None) -> BaseChatModel:
    """Create and return the configured LLM instance.

    Uses LangChain's BaseChatModel abstraction for LLM-agnostic access.
    Default: OpenAI GPT-4o via langchain-openai.
    """
    settings = settings or get_settings()
    provider = settings.finvoice_llm_provider.lower()

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.finvoice_llm_model,
            api_key=settings.openai_api_key or None,
            timeout=settings.finvoice_stage_timeout,
            max_retries=0,
        )
    elif provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=settings.finvoice_llm_model,
            temperature=0,
            api_key=settings.anthropic_api_key,
            timeout=settings.finvoice_stage_timeout,
            max_retries=0,
        )
    else:
        raise ValueError(
            f"Unsupported LLM provider: {provider}. "
            "Supported: 'openai', 'anthropic'"
        )
