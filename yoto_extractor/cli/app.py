"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from yoto_extractor import __version__
from yoto_extractor.core.extractor import CardExtractor
from yoto_extractor.exceptions import YotoExtractorError
from yoto_extractor.storage.config_manager import ConfigManager

from .formatters import format_error_with_suggestions, print_summary_panel
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("yoto_extractor")

app = typer.Typer(
    name="yoto-extractor",
    help=(
        "Download a Yoto card's artwork, audio tracks, and icons into a local"
        " folder, together with plain-text metadata reports."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "yoto-extractor"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _version_callback(value: bool):
    if value:
        console.print(
            f"[bold]yoto-extractor[/bold] version [cyan]{__version__}[/cyan]"
        )
        raise typer.Exit()


@app.command()
def extract(
    url: str = typer.Argument(
        ..., help="The card page URL. 'https://' is added if no scheme is given."
    ),
    folder: str = typer.Argument(
        ..., help="Destination folder; created if missing, overwritten if present."
    ),
    workers: int | None = typer.Option(
        None,
        "-w",
        "--workers",
        help="Number of simultaneous track downloads (default 4).",
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Per-request timeout in seconds (default 120)."
    ),
    retries: int | None = typer.Option(
        None,
        "--retries",
        help="Extra attempts for requests failing with a network error (default 0).",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        is_eager=True,
        callback=_version_callback,
    ),
):
    """Extract a Yoto card into FOLDER."""
    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    log.setLevel(log_level)

    cli_options = {
        key: value
        for key, value in {
            "url": url,
            "output_dir": folder,
            "max_workers": workers,
            "timeout": timeout,
            "retries": retries,
        }.items()
        if value is not None
    }

    async def _extract_async():
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
        log.debug(
            f"Using {config.max_workers} workers, {config.timeout:g}s timeout, "
            f"{config.retries} retries."
        )

        async with ProgressManager(
            console=console, enabled=console.is_terminal and verbose < 2
        ) as progress_manager:
            extractor = CardExtractor(config, progress_manager=progress_manager)
            console.print("[bold cyan]🎵 Starting extraction...[/bold cyan]")
            start_time = time.monotonic()
            stats = await extractor.extract()
            duration = time.monotonic() - start_time
            progress_stats = progress_manager.get_statistics()

        print_summary_panel(
            stats, config.output_dir, duration, progress_stats, console=console
        )

    try:
        asyncio.run(_extract_async())
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        raise typer.Exit(code=0) from None
    except YotoExtractorError as e:
        console.print()
        console.print(format_error_with_suggestions(e))
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e
