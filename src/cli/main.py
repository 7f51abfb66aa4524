"""FinVoice CLI entry point."""

import typer

from src.cli.ask import ask
from src.cli.ingest import forget, ingest

app = typer.Typer(
    name="finvoice",
    help="Voice finance tutor - ask spoken questions answered from your own reference documents.",
)

app.command(name="ask")(ask)
app.command(name="ingest")(ingest)
app.command(name="forget")(forget)


if __name__ == "__main__":
    app()
