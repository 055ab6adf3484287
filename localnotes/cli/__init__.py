"""
CLI Module.

Command-line front end built with Typer for managing notes.

Architecture:
- CLI is a thin presentation layer
- All note logic lives in the session controller and repository
- Confirmations are answered with typer.confirm (or --yes)

Usage:
    python cli.py --help
    python cli.py notes list
    python cli.py notes add --title "Groceries" --content "milk"
    python cli.py tui
"""
