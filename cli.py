#!/usr/bin/env python3
"""
Local Notes CLI.

Command-line client for the local note store.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    python cli.py --help                              # Show help

    # Notes
    python cli.py notes list                          # List all notes
    python cli.py notes list -q milk                  # Filter by title/content
    python cli.py notes search milk                   # Same as list -q
    python cli.py notes show <id>                     # Show one note
    python cli.py notes add -t "Title" -c "Body"      # Create a note
    python cli.py notes edit <id> -c "New body"       # Edit a note
    python cli.py notes delete <id> [--yes]           # Delete a note

    # System info
    python cli.py system info                         # Show app info and storage location
    python cli.py system config                       # Show configuration
    python cli.py system version                      # Show version

    # Interactive mode
    python cli.py tui                                 # Start the terminal UI

Options:
    --verbose, -v     Enable verbose output
    --debug           Enable debug mode (detailed logging)
    --help            Show help message
"""

import sys
from pathlib import Path

import typer
from rich.console import Console

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from localnotes.cli.commands import notes_app, system_app
from localnotes.core.config import find_project_root

# Create main app
app = typer.Typer(
    name="localnotes",
    help="Local Notes CLI - create, search, edit, and delete notes stored on this device.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register command groups
app.add_typer(notes_app, name="notes")
app.add_typer(system_app, name="system")


def _validate_project_root() -> None:
    """Validate that a .project_root marker is reachable from the working directory."""
    try:
        find_project_root()
    except RuntimeError:
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


@app.command()
def tui(
    autosave: bool | None = typer.Option(
        None,
        "--autosave/--no-autosave",
        help="Override editor.yaml autosave setting",
        show_default=False,
    ),
) -> None:
    """
    Start the interactive terminal UI.
    """
    from tui import run_tui

    run_tui(autosave=autosave)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Local Notes CLI.

    Notes are kept in a single local file and saved after every change.
    Built with Typer for type-safe commands and Rich for formatted output.
    """
    # Validate project root
    _validate_project_root()

    # Configure logging based on flags
    from localnotes.core.logging import setup_logging

    if debug:
        setup_logging(level="DEBUG", format_type="console", enable_console=True)
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console", enable_console=True)
    else:
        setup_logging()


if __name__ == "__main__":
    app()
