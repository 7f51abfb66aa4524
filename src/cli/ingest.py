"""CLI commands for reference document ingestion."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from config.settings import get_settings
from src.cli.components import build_ingestor, build_store
from src.embedding.config import get_embedding_provider
from src.errors import DocumentTooLarge, InvalidConfig, VectorIndexError
from src.models.query import IngestionResult

console = Console()
app = typer.Typer()


@app.command()
def ingest(
    files: Annotated[
        list[Path],
        typer.Argument(help="Documents to ingest (PDF, HTML, text)", exists=True, dir_okay=False),
    ],
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", help="Chunk size in characters"),
    ] = None,
    chunk_overlap: Annotated[
        int | None,
        typer.Option("--chunk-overlap", help="Overlap between chunks in characters"),
    ] = None,
    replace: Annotated[
        bool,
        typer.Option("--replace", help="Delete a document's previous chunks before indexing"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Ingest reference documents into the vector store."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    try:
        ingestor = build_ingestor(settings, chunk_size=chunk_size, chunk_overlap=chunk_overlap)
    except InvalidConfig as e:
        console.print(f"[bold red]Invalid configuration:[/bold red] {e.message}")
        raise typer.Exit(2)

    console.print("[bold]FinVoice Ingestion[/bold]")
    console.print(
        f"Chunk size: {chunk_size or settings.finvoice_chunk_size} chars, "
        f"overlap: {chunk_overlap if chunk_overlap is not None else settings.finvoice_chunk_overlap} chars"
    )
    console.print()

    results: list[IngestionResult] = []
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Ingesting documents...", total=len(files))
        for path in files:
            progress.update(task, description=f"Ingesting {path.name}...")
            size = path.stat().st_size
            if size > settings.max_document_bytes:
                console.print(f"[yellow]Skipping {escape(path.name)}: too large[/yellow]")
                results.append(IngestionResult(
                    source=path.name,
                    error=DocumentTooLarge(
                        f"{size} bytes exceeds the {settings.finvoice_max_document_mb} MB limit"
                    ),
                ))
                progress.advance(task)
                continue
            results.append(ingestor.ingest_file(path.read_bytes(), path.name, replace=replace))
            progress.advance(task)

    table = Table(title="Ingestion results")
    table.add_column("Document")
    table.add_column("Chunks", justify="right")
    table.add_column("Status")
    for result in results:
        status = "[green]ok[/green]" if result.ok else f"[red]{escape(str(result.error))}[/red]"
        table.add_row(escape(result.source), str(result.chunks_indexed), status)

    console.print(table)
    console.print(f"  Chunks stored: {sum(r.chunks_indexed for r in results)}")
    console.print(f"  Errors: {sum(1 for r in results if not r.ok)}")

    if any(not r.ok for r in results):
        raise typer.Exit(1)


@app.command()
def forget(
    source: Annotated[
        str,
        typer.Argument(help="Document name as it was ingested"),
    ],
):
    """Remove every chunk of a previously ingested document."""
    settings = get_settings()
    store = build_store(settings, get_embedding_provider(settings))
    before = store.count
    try:
        store.delete_document(source)
    except VectorIndexError as e:
        console.print(f"[bold red]Could not remove {escape(source)}:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print(f"Removed {before - store.count} chunks for [bold]{escape(source)}[/bold]")
