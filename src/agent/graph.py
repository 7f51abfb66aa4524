"""LangGraph workflow definition for the spoken finance Q&A pipeline.

RECEIVED → TRANSCRIBED → RETRIEVED → GENERATED → PARSED → SYNTHESIZED,
with any fatal stage result diverted to FAILED.
"""

import logging
from functools import partial

from langgraph.graph import END, StateGraph

from src.agent.nodes import fail, generate, parse, retrieve, synthesize, transcribe
from src.agent.stages import Fatal
from src.agent.state import QueryState
from src.llm.generator import Generator
from src.models.enums import PipelineStage
from src.models.query import QueryRequest, QueryResult
from src.retrieval.retriever import DEFAULT_TOP_K, Retriever
from src.speech.synthesis import SpeechSynthesizer
from src.speech.transcription import Transcriber

logger = logging.getLogger(__name__)


def _advance_to(next_node: str):
    """Router: follow next_node unless the last stage result was fatal."""

    def route(state: QueryState) -> str:
        if isinstance(state.get("last_result"), Fatal):
            return "fail"
        return next_node

    return route


def _route_after_parse(state: QueryState) -> str:
    if state["request"].speak:
        return "synthesize"
    return END


def build_graph(
    transcriber: Transcriber | None,
    retriever: Retriever,
    generator: Generator,
    synthesizer: SpeechSynthesizer | None = None,
    top_k: int = DEFAULT_TOP_K,
    timeout: float | None = None,
):
    """Build the query workflow.

    Args:
        transcriber: Speech-to-text client; may be None for text-only use.
        retriever: Context retriever.
        generator: Generation client.
        synthesizer: Text-to-speech client; None disables the final stage.
        top_k: Number of chunks to retrieve.
        timeout: Per-call limit in seconds for transcription, generation
            and synthesis. Retrieval applies its own.

    Returns:
        A compiled LangGraph StateGraph.
    """
    graph = StateGraph(QueryState)

    graph.add_node("transcribe", partial(transcribe, transcriber=transcriber, timeout=timeout))
    graph.add_node("retrieve", partial(retrieve, retriever=retriever, top_k=top_k))
    graph.add_node("generate", partial(generate, generator=generator, timeout=timeout))
    graph.add_node("parse", parse)
    graph.add_node("fail", fail)

    graph.set_entry_point("transcribe")

    graph.add_conditional_edges("transcribe", _advance_to("retrieve"))
    graph.add_edge("retrieve", "generate")
    graph.add_conditional_edges("generate", _advance_to("parse"))
    graph.add_edge("fail", END)

    if synthesizer is not None:
        graph.add_node("synthesize", partial(synthesize, synthesizer=synthesizer, timeout=timeout))
        graph.add_conditional_edges("parse", _route_after_parse)
        graph.add_edge("synthesize", END)
    else:
        graph.add_edge("parse", END)

    return graph.compile()


class QueryOrchestrator:
    """Runs one question through the workflow and shapes the result.

    Holds only the injected capability clients; each call to answer() gets
    its own graph state, so concurrent requests share nothing.
    """

    def __init__(
        self,
        transcriber: Transcriber | None,
        retriever: Retriever,
        generator: Generator,
        synthesizer: SpeechSynthesizer | None = None,
        top_k: int = DEFAULT_TOP_K,
        timeout: float | None = None,
    ):
        self._graph = build_graph(
            transcriber=transcriber,
            retriever=retriever,
            generator=generator,
            synthesizer=synthesizer,
            top_k=top_k,
            timeout=timeout,
        )

    def answer(self, request: QueryRequest) -> QueryResult:
        initial_state: QueryState = {
            "request": request,
            "stage": PipelineStage.RECEIVED,
            "transcription": None,
            "context": None,
            "raw_response": None,
            "scratchpad": None,
            "answer": None,
            "audio": None,
            "error": None,
        }
        state = self._graph.invoke(initial_state)

        context = state.get("context")
        result = QueryResult(
            stage=state["stage"],
            transcription=state.get("transcription"),
            answer=state.get("answer"),
            scratchpad=state.get("scratchpad"),
            audio=state.get("audio"),
            error=state.get("error"),
            context_status=context.status if context else None,
        )
        logger.info("Query finished at stage %s", result.stage.value)
        return result
