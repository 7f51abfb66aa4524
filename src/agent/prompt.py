"""Prompt composition for the grounded finance answer."""

from dataclasses import dataclass

SCRATCHPAD_OPEN = "<scratchpad>"
SCRATCHPAD_CLOSE = "</scratchpad>"
ANSWER_MARKER = "###"

INSTRUCTION = (
    "You are a finance professor.\n"
    f"Think step-by-step in {SCRATCHPAD_OPEN}...{SCRATCHPAD_CLOSE} "
    f"then after {ANSWER_MARKER} give the final answer.\n"
    "Use the following context to answer the question:"
)


@dataclass(frozen=True)
class ComposedPrompt:
    """The instruction/context/question triple sent to the generative model."""

    instruction: str
    context: str
    question: str

    def system_message(self) -> str:
        return f"{self.instruction}\n\nContext:\n{self.context}"


def compose(context: str, question: str) -> ComposedPrompt:
    """Build the generation payload.

    The instruction pins the output contract the response parser relies on:
    reasoning inside the scratchpad tags, then the answer marker, then the
    final answer.
    """
    return ComposedPrompt(instruction=INSTRUCTION, context=context, question=question)
