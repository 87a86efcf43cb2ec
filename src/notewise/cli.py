"""NoteWise CLI."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from notewise.config import settings
from notewise.errors import NoteWiseError
from notewise.generation import GeminiClient
from notewise.models import RunStatus, SummaryLength, SummaryOptions, SummaryStyle
from notewise.pipeline import StudySession
from notewise.speech import SpeechCapabilities
from notewise.storage import SQLSessionStore

app = typer.Typer(
    name="notewise",
    help="AI study assistant: notes, summaries, flashcards and Q&A from your documents",
    add_completion=False,
)
console = Console()


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _session(speech: Optional[SpeechCapabilities] = None) -> StudySession:
    try:
        client = GeminiClient()
    except NoteWiseError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(code=1)
    return StudySession(
        client,
        store=SQLSessionStore(),
        speech=speech or SpeechCapabilities(),
        on_progress=lambda percent, message: console.print(f"[dim]{percent:3d}%[/dim] {message}"),
    )


def _load_input(session: StudySession, source: str, text: bool) -> None:
    if text:
        session.set_text(source)
    else:
        session.select_path(Path(source))


@app.command()
def process(
    source: str = typer.Argument(..., help="Path to a PDF/TXT/DOCX file, or text with --text"),
    text: bool = typer.Option(False, "--text", help="Treat SOURCE as pasted text"),
    length: Optional[SummaryLength] = typer.Option(None, help="Summary length (enables customization)"),
    style: Optional[SummaryStyle] = typer.Option(None, help="Summary style (enables customization)"),
    parallel: Optional[bool] = typer.Option(
        None,
        "--parallel/--sequential",
        help="Run the three generators concurrently (default from settings)",
    ),
) -> None:
    """Generate notes, a summary, flashcards and key concepts."""
    _configure_logging()
    session = _session()
    if parallel is not None:
        session.parallel = parallel
    if length is not None or style is not None:
        session.configure_summary(
            True,
            SummaryOptions(
                length=length or SummaryLength.MEDIUM,
                style=style or SummaryStyle.PARAGRAPH,
            ),
        )

    with session:
        try:
            _load_input(session, source, text)
            result = asyncio.run(session.process())
        except (NoteWiseError, FileNotFoundError) as e:
            console.print(f"[red]{getattr(e, 'message', e)}[/red]")
            raise typer.Exit(code=1)

    if result.status != RunStatus.COMPLETE:
        console.print(f"[red]{result.error or 'Processing did not complete.'}[/red]")
        raise typer.Exit(code=1)

    console.print(Panel(result.notes or "", title="Notes"))
    if session.summary is not None:
        console.print(Panel(session.summary.text, title="Summary"))
    if session.flashcards is not None:
        table = Table(title=f"Flashcards ({len(session.flashcards)})")
        table.add_column("Question")
        table.add_column("Answer")
        for card in session.flashcards.cards:
            table.add_row(card.question, card.answer)
        console.print(table)
    if session.key_concepts is not None:
        table = Table(title="Key Concepts")
        table.add_column("Term", style="bold")
        table.add_column("Definition")
        for concept in session.key_concepts.concepts:
            table.add_row(concept.term, concept.definition)
        console.print(table)
    for notice in result.notices:
        console.print(f"[yellow]{notice.message}[/yellow]")


async def _notes_then_ask(session: StudySession, question: str):
    run = await session.process(derive=False)
    if run.status != RunStatus.COMPLETE:
        return run, None
    return run, await session.ask(question)


@app.command()
def ask(
    source: str = typer.Argument(..., help="Path to a PDF/TXT/DOCX file, or text with --text"),
    question: str = typer.Argument(..., help="Question to answer from the notes"),
    text: bool = typer.Option(False, "--text", help="Treat SOURCE as pasted text"),
) -> None:
    """Answer a question using only the document's notes."""
    _configure_logging()
    with _session() as session:
        try:
            _load_input(session, source, text)
            run, result = asyncio.run(_notes_then_ask(session, question))
        except (NoteWiseError, FileNotFoundError) as e:
            console.print(f"[red]{getattr(e, 'message', e)}[/red]")
            raise typer.Exit(code=1)

    if result is None:
        console.print(f"[red]{run.error}[/red]")
        raise typer.Exit(code=1)
    if result.failed:
        console.print(f"[red]{result.error.message}[/red]")
        raise typer.Exit(code=1)
    console.print(Panel(result.value.text, title="Answer"))


@app.command()
def explain(
    fragment: str = typer.Argument(..., help="Text to explain in simple terms"),
) -> None:
    """Explain a piece of text like I'm five."""
    _configure_logging()
    with _session() as session:
        try:
            dialog = asyncio.run(session.explain(fragment))
        except NoteWiseError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(code=1)

    if dialog.error:
        console.print(f"[red]{dialog.error}[/red]")
        raise typer.Exit(code=1)
    console.print(Panel(dialog.explanation.text, title="Simple Explanation"))


@app.command()
def speak(
    text: str = typer.Argument(..., help="Text to read aloud"),
    lang: str = typer.Option("en-US", help="Language tag for voice selection"),
) -> None:
    """Read text aloud (no-op when no speech engine is available)."""
    _configure_logging()
    capabilities = SpeechCapabilities.detect()
    if not capabilities.speak(text, lang):
        console.print("[yellow]Speech output is not available on this system.[/yellow]")


@app.command()
def status() -> None:
    """Show configuration and capability status."""
    console.print("[bold blue]NoteWise Status[/bold blue]")
    console.print()
    capabilities = SpeechCapabilities.detect()
    table = Table(show_header=False)
    table.add_row("Model", settings.gemini_model)
    table.add_row("API key", "set" if settings.google_api_key else "[red]missing[/red]")
    table.add_row("Timeout", f"{settings.generation_timeout_seconds:g}s")
    table.add_row("Parallel generators", str(settings.parallel_generators))
    table.add_row("Session store", settings.session_db_url)
    table.add_row("Speech output", "available" if capabilities.output_supported else "unavailable")
    table.add_row("Speech input", "available" if capabilities.input_supported else "unavailable")
    console.print(table)


if __name__ == "__main__":
    app()
