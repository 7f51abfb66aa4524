"""Unit tests for the chat-model generator and LLM selection."""

from unittest.mock import MagicMock

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from config.settings import Settings
from src.agent.prompt import compose
from src.errors import GenerationError
from src.llm.config import get_llm
from src.llm.generator import ChatModelGenerator


@pytest.fixture
def prompt():
    return compose("A bond's coupon is fixed at issue.", "Can a coupon change?")


class TestChatModelGenerator:
    def test_returns_model_text(self, prompt):
        llm = FakeListChatModel(responses=["<scratchpad>fixed</scratchpad>### No."])
        assert ChatModelGenerator(llm).generate(prompt) == "<scratchpad>fixed</scratchpad>### No."

    def test_sends_context_as_system_and_question_as_user(self, prompt):
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(content="### No.")
        ChatModelGenerator(llm).generate(prompt)
        system, user = llm.invoke.call_args.args[0]
        assert isinstance(system, SystemMessage)
        assert "A bond's coupon is fixed at issue." in system.content
        assert isinstance(user, HumanMessage)
        assert user.content == "Can a coupon change?"

    def test_joins_content_blocks(self, prompt):
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(content=[
            {"type": "text", "text": "### "},
            {"type": "text", "text": "No."},
        ])
        assert ChatModelGenerator(llm).generate(prompt) == "### No."

    def test_model_error_is_wrapped(self, prompt):
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("connection reset")
        with pytest.raises(GenerationError, match="connection reset"):
            ChatModelGenerator(llm).generate(prompt)

    def test_empty_content_is_an_error(self, prompt):
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(content="")
        with pytest.raises(GenerationError):
            ChatModelGenerator(llm).generate(prompt)


class TestGetLlm:
    def test_openai_is_default(self):
        from langchain_openai import ChatOpenAI

        llm = get_llm(Settings(openai_api_key="sk-test", _env_file=None))
        assert isinstance(llm, ChatOpenAI)
        assert llm.model_name == "gpt-4o"
        assert llm.max_retries == 0

    def test_unknown_provider_is_rejected(self):
        with pytest.raises(ValueError, match="Unsupported LLM provider"):
            get_llm(Settings(finvoice_llm_provider="llama", _env_file=None))
