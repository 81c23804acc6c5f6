"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from yoto_extractor.models.stats import ExtractStats
from yoto_extractor.utils.formatting import convert_bytes, format_duration


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "FetchError": [
            "• Check the URL in a browser; the card may be private or removed.",
            "• Check your internet connection.",
            "• Raise `--timeout` or add `--retries` on a slow connection.",
        ],
        "ParseError": [
            "• The page did not contain card data.",
            "• Make sure the URL points at a single card, not a store or list page.",
        ],
        "SchemaError": [
            "• The page returned JSON, but not in a known card format.",
            "• The site may have changed; run with -vv and report the output.",
        ],
        "FilesystemError": [
            "• Check that the destination folder is writable.",
            "• Make sure no regular file sits where a folder should be created.",
        ],
        "ConfigurationError": [
            "• Check the values in your configuration file.",
            "• Workers must be 1-16, retries 0-5, and the timeout positive.",
        ],
        "TimeoutError": [
            "• The request timed out, which may indicate network throttling.",
            "• Try raising `--timeout` or reducing the number of `--workers`.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]Extraction Failed[/bold red]",
        border_style="red",
        expand=False,
    )


def print_summary_panel(
    stats: ExtractStats,
    output_dir: Path,
    duration_s: float,
    progress_stats: dict | None = None,
    console: Console | None = None,
):
    """Displays a final summary of the extraction run."""
    console = console or Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row(
        "✓ Tracks Saved:",
        f"[bold green]{stats.tracks_downloaded}[/bold green] / {stats.tracks_total}",
    )
    if stats.tracks_without_audio > 0:
        stats_table.add_row(
            "○ No Audio:", f"[yellow]{stats.tracks_without_audio}[/yellow]"
        )
    if stats.tracks_failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{stats.tracks_failed}[/bold red]")

    icons = f"[green]{stats.icons_downloaded}[/green]"
    if stats.icons_failed > 0:
        icons += f" ([red]{stats.icons_failed} failed[/red])"
    stats_table.add_row("Icons:", icons)
    stats_table.add_row(
        "Artwork:",
        "[green]✓ Saved[/green]" if stats.artwork_downloaded else "[dim]✗ None[/dim]",
    )

    stats_table.add_row("", "")  # Spacer

    stats_table.add_row(
        "Total Size:", f"[cyan]{convert_bytes(stats.total_size_downloaded)}[/cyan]"
    )
    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")

    peak_concurrent = (progress_stats or {}).get("peak_concurrent", 0)
    if peak_concurrent:
        stats_table.add_row("Peak Concurrent:", f"[green]{peak_concurrent}[/green]")

    stats_table.add_row("Saved To:", f"[dim]{output_dir}[/dim]")

    if stats.tracks_failed or stats.icons_failed:
        title = "⚠ [bold]Extraction Finished With Errors[/bold]"
        border_color = "yellow"
    else:
        title = "🎵 [bold]Extraction Complete![/bold]"
        border_color = "green"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
