"""
System Commands.

Commands for application information and configuration.
"""

import typer
from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

app = typer.Typer(help="System information commands")
console = Console()


@app.command()
def info() -> None:
    """
    Display application information.

    Shows app name, version, and where notes are stored.
    """
    try:
        from localnotes.core.config import get_app_config, get_data_dir, get_storage_backend

        app_config = get_app_config()
        backend = get_storage_backend()
        location = str(get_data_dir()) if backend == "file" else "memory (not persisted)"

        console.print(Panel(
            f"[bold]{app_config.application.name}[/bold]\n"
            f"Version: {app_config.application.version}\n"
            f"Description: {app_config.application.description}\n"
            f"Storage: {location} (key: {app_config.storage.key})",
            title="Application Info",
        ))

    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def config(
    section: str | None = typer.Argument(None, help="Config section to show (application, logging, storage, editor)"),
) -> None:
    """
    Display configuration settings.

    Shows all configuration or a specific section.
    """
    try:
        from localnotes.core.config import get_app_config

        app_config = get_app_config()

        sections = {
            "application": app_config.application.model_dump(),
            "logging": app_config.logging.model_dump(),
            "storage": app_config.storage.model_dump(),
            "editor": app_config.editor.model_dump(),
        }

        if section:
            if section not in sections:
                console.print(f"[red]Unknown section: {section}[/red]")
                console.print(f"Available sections: {', '.join(sections.keys())}")
                raise typer.Exit(1)

            _display_config_section(section, sections[section])
        else:
            for name, data in sections.items():
                _display_config_section(name, data)
                console.print()

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)


def _display_config_section(name: str, data: dict) -> None:
    """Display a configuration section as a tree."""
    tree = Tree(f"[bold cyan]{name}[/bold cyan]")

    def add_items(parent: Tree, items: dict) -> None:
        for key, value in items.items():
            if isinstance(value, dict):
                branch = parent.add(f"[cyan]{key}[/cyan]")
                add_items(branch, value)
            else:
                parent.add(f"[cyan]{key}[/cyan]: {value}")

    add_items(tree, data)
    console.print(tree)


@app.command()
def version() -> None:
    """
    Display version information.
    """
    try:
        from localnotes.core.config import get_app_config

        console.print(f"[bold]{get_app_config().application.version}[/bold]")

    except Exception:
        console.print("[yellow]unknown[/yellow]")
