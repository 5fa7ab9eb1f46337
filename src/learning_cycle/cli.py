"""
cli.py — Console entry point for the learning cycle

Run:
    learning-cycle
    python -m learning_cycle

Requires:
    .env file with the Azure OpenAI and Azure Blob Storage settings.
    See .env.example for format.
"""

from __future__ import annotations

import logging
import sys

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from learning_cycle import __version__
from learning_cycle.agents import build_collaborators
from learning_cycle.channel import ConsoleChannel
from learning_cycle.config import Settings, get_settings
from learning_cycle.errors import ConfigurationError, InputClosed
from learning_cycle.events import ProcessEvent
from learning_cycle.progress_store import ProgressStore
from learning_cycle.resources import BlobResourceProvider
from learning_cycle.workflow import build_learning_process

logger = logging.getLogger("learning_cycle")

console = Console()


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=debug)],
    )


def _banner(settings: Settings) -> Panel:
    table = Table(box=box.ROUNDED, show_header=False, padding=(0, 1))
    table.add_column("Service", style="bold cyan", no_wrap=True)
    table.add_column("Status")
    for service, status in settings.status_summary().items():
        table.add_row(service, status)
    table.add_row("Progress file", str(settings.app.progress_path))
    table.add_row("Schedules", str(settings.app.schedules_dir))
    return Panel(table, title=f"[bold]Learning Cycle {__version__}[/bold]", border_style="magenta")


def main() -> int:
    settings = get_settings()
    _configure_logging(settings.app.debug)
    try:
        settings.require()
    except ConfigurationError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        return 2

    console.print(_banner(settings))

    engine = build_learning_process(
        collaborators = build_collaborators(settings),
        channel       = ConsoleChannel(console),
        store         = ProgressStore(settings.app.progress_path),
        provider      = BlobResourceProvider.from_config(settings.blob, settings.app.downloads_dir),
        schedules_dir = settings.app.schedules_dir,
        plan_attempts = settings.app.plan_attempts,
    )

    exit_code = 0
    try:
        engine.start(ProcessEvent.START)
    except (InputClosed, KeyboardInterrupt):
        console.print()
        console.print("[dim]Session ended.[/dim]")
    except Exception:
        logger.exception("The learning cycle stopped unexpectedly")
        exit_code = 1

    if engine.trace.steps:
        console.print(engine.trace.to_table())
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
