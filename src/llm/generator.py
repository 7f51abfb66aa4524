"""Generation capability: composed prompt in, raw model text out."""

import logging
from abc import ABC, abstractmethod

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from src.agent.prompt import ComposedPrompt
from src.errors import GenerationError

logger = logging.getLogger(__name__)


class Generator(ABC):
    """Interface for the single generation call of a query."""

    @abstractmethod
    def generate(self, prompt: ComposedPrompt) -> str:
        """Return the model's raw text.

        Raises:
            GenerationError: If the call fails or produces no content.
        """
        ...


class ChatModelGenerator(Generator):
    """Generator over any LangChain chat model.

    Instruction and context go in the system message, the question in the
    user message.
    """

    def __init__(self, llm: BaseChatModel):
        self._llm = llm

    def generate(self, prompt: ComposedPrompt) -> str:
        messages = [
            SystemMessage(content=prompt.system_message()),
            HumanMessage(content=prompt.question),
        ]
        try:
            response = self._llm.invoke(messages)
        except Exception as e:
            raise GenerationError(f"Chat model call failed: {e}") from e

        content = response.content
        if isinstance(content, list):
            # Some providers return content blocks instead of a string
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        if not content or not content.strip():
            raise GenerationError("No response content from the chat model")
        return content
