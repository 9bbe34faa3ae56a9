"""
Command-line interface for stackcalc.

Provides commands for:
- Evaluating a key sequence in one shot
- An interactive keypad prompt
- Running the API server
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from stackcalc import __version__
from stackcalc.config import settings
from stackcalc.evaluator import CalculatorError
from stackcalc.logging_config import configure_logging
from stackcalc.parsing import EntryError, split_keys
from stackcalc.session import CalculatorSession

app = typer.Typer(
    name="stackcalc",
    help="stackcalc - Keypad calculator expression evaluator",
    add_completion=False,
)

console = Console()

_CLEAR_WORDS = {"ac", "c", "clear"}
_QUIT_WORDS = {"q", "quit", "exit"}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"stackcalc {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", "-L", help="Logging level"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Configure logging before any command runs."""
    # Debug mode and stack tracing both need debug-level events
    if settings.debug or settings.trace_stack:
        log_level = "DEBUG"
    configure_logging(log_level, settings.log_format)


# =============================================================================
# Evaluation Commands
# =============================================================================

@app.command("eval")
def evaluate(
    keys: str = typer.Argument(..., help='Key sequence, e.g. "1 + 2 * 3 ="'),
    trace: bool = typer.Option(False, "--trace", "-t", help="Show every press"),
    integer: bool = typer.Option(False, "--integer", "-i", help="Accept whole numbers only"),
):
    """Evaluate a key sequence and print the display."""
    session = CalculatorSession(integer_input=integer or settings.integer_input)

    try:
        presses = split_keys(keys)
    except EntryError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(2)

    table = Table(title="Presses")
    table.add_column("Entry", style="cyan")
    table.add_column("Key", style="magenta")
    table.add_column("Display", style="green")
    table.add_column("Stack", style="dim")

    outcome = None
    for press in presses:
        outcome = session.press(press.entry, press.operator)
        table.add_row(
            press.entry or "[dim]<empty>[/]",
            press.operator.value,
            outcome.display,
            " ".join(session.stack_snapshot()),
        )
        if outcome.invalid:
            break

    if trace:
        console.print(table)

    if outcome is None:
        console.print("[yellow]Nothing to evaluate[/]")
        raise typer.Exit(1)

    if outcome.invalid:
        console.print(f"[red]{outcome.display}[/]")
        raise typer.Exit(1)

    console.print(outcome.display)


@app.command()
def repl(
    integer: bool = typer.Option(False, "--integer", "-i", help="Accept whole numbers only"),
):
    """Interactive keypad: type an entry and an operator per line."""
    session = CalculatorSession(integer_input=integer or settings.integer_input)

    console.print("[bold]stackcalc[/] - enter e.g. [cyan]12 +[/], [cyan]AC[/] to clear, [cyan]quit[/] to leave")

    while True:
        try:
            line = console.input("[bold blue]> [/]")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        word = line.strip().lower()
        if not word:
            continue
        if word in _QUIT_WORDS:
            break
        if word in _CLEAR_WORDS:
            session.all_clear()
            console.print("[dim]cleared[/]")
            continue

        try:
            outcome = session.run(line)
        except CalculatorError as e:
            console.print(f"[red]{e}[/]")
            continue

        if session.expression:
            console.print(f"[dim]{session.expression.strip()}[/]")
        style = "red" if outcome.invalid else "green"
        console.print(f"[{style}]{outcome.display}[/]")


# =============================================================================
# Server Commands
# =============================================================================

@app.command()
def serve(
    host: str = typer.Option(settings.host, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
):
    """Start the stackcalc API server."""
    import uvicorn

    console.print(f"[bold green]Starting stackcalc server on {host}:{port}[/]")

    uvicorn.run(
        "stackcalc.api:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
