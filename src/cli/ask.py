"""CLI command for asking spoken or typed finance questions."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from config.settings import get_settings
from src.cli.components import build_orchestrator
from src.models.enums import ContextStatus
from src.models.query import QueryRequest

console = Console()
app = typer.Typer()

logger = logging.getLogger(__name__)


@app.command()
def ask(
    question: Annotated[
        str | None,
        typer.Argument(help="Your finance question (omit when using --audio)"),
    ] = None,
    audio: Annotated[
        Path | None,
        typer.Option("--audio", "-a", help="Recorded question to transcribe", exists=True, dir_okay=False),
    ] = None,
    speak_to: Annotated[
        Path | None,
        typer.Option("--speak-to", "-o", help="Write the spoken answer to this file"),
    ] = None,
    show_reasoning: Annotated[
        bool,
        typer.Option("--show-reasoning", help="Print the model's scratchpad"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Ask a question grounded in the ingested reference documents."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()

    if question is None and audio is None:
        console.print("[bold red]Provide a question or --audio.[/bold red]")
        raise typer.Exit(2)

    # Speech always goes through OpenAI; text-only questions may not touch it
    needs_openai = (
        audio is not None
        or speak_to is not None
        or settings.finvoice_llm_provider.lower() == "openai"
        or settings.finvoice_embedding_provider.lower() == "openai"
    )
    if needs_openai and not settings.openai_api_key:
        console.print(
            "[bold red]OPENAI_API_KEY not set.[/bold red]\n"
            "Export your API key: export OPENAI_API_KEY='sk-...'"
        )
        raise typer.Exit(1)

    if not settings.anthropic_api_key and settings.finvoice_llm_provider.lower() == "anthropic":
        console.print(
            "[bold red]ANTHROPIC_API_KEY not set.[/bold red]\n"
            "Export your API key: export ANTHROPIC_API_KEY='sk-ant-...'"
        )
        raise typer.Exit(1)

    audio_bytes = None
    if audio is not None:
        if audio.stat().st_size > settings.max_audio_bytes:
            console.print(
                f"[bold red]Audio file exceeds the {settings.finvoice_max_audio_mb} MB limit.[/bold red]"
            )
            raise typer.Exit(2)
        audio_bytes = audio.read_bytes()

    orchestrator, store = build_orchestrator(
        settings,
        with_transcription=audio is not None,
        with_speech=speak_to is not None,
    )
    if store.count == 0:
        console.print(
            "[yellow]No documents in the vector store; answering without context.[/yellow]\n"
            "Run 'finvoice ingest FILE' to add reference documents."
        )

    request = QueryRequest(
        audio=audio_bytes,
        question=question,
        audio_filename=audio.name if audio else "question.webm",
        speak=speak_to is not None,
    )

    with console.status("[bold green]Thinking..."):
        result = orchestrator.answer(request)

    if result.transcription:
        console.print(Text.assemble(("You asked: ", "dim"), result.transcription))

    if result.failed:
        console.print(f"[bold red]Failed:[/bold red] {escape(str(result.error))}")
        raise typer.Exit(1)

    if show_reasoning and result.scratchpad:
        console.print(Panel(Text(result.scratchpad), title="Reasoning", border_style="dim"))

    grounded = result.context_status == ContextStatus.FOUND
    color = "green" if grounded else "yellow"
    header = Text()
    header.append("FinVoice", style="bold")
    header.append("  Context: ", style="dim")
    header.append("grounded" if grounded else "none", style=f"bold {color}")

    console.print()
    console.print(Panel(Text(result.answer or ""), title=header, border_style=color, padding=(1, 2)))

    if speak_to is not None:
        if result.audio:
            speak_to.write_bytes(result.audio)
            console.print(f"Spoken answer written to {speak_to}")
        else:
            console.print(f"[yellow]No audio produced: {escape(str(result.error))}[/yellow]")
