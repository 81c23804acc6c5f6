"""
Entry point for `yoto-extractor` and `python -m yoto_extractor`.

Errors escaping the command are rendered as an error panel here; anything
unexpected also gets its traceback logged at debug level.
"""

import asyncio
import logging
import os
import sys

import typer
from rich.console import Console

from yoto_extractor.cli.app import app
from yoto_extractor.cli.formatters import format_error_with_suggestions
from yoto_extractor.exceptions import YotoExtractorError

log = logging.getLogger("yoto_extractor")


def _force_utf8_output() -> None:
    """Windows consoles default to a legacy code page that cannot print the panels."""
    if os.name != "nt":
        return
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass


def main() -> None:
    _force_utf8_output()
    console = Console(stderr=True)

    try:
        app(prog_name="yoto-extractor")
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        sys.exit(0)
    except YotoExtractorError as e:
        console.print()
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        context = {"type": "Unexpected", "where": type(e).__module__}
        console.print()
        console.print(format_error_with_suggestions(e, context))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
