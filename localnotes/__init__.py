"""
Local Notes.

- core/: Configuration, logging, exceptions, shared utilities
- schemas/: Note models and the persisted collection codec
- storage/: Durable key-value blob stores
- repositories/: Canonical in-memory note collection
- services/: Query view, session controller, autosave, display helpers
- cli/: Command groups for the Typer CLI (Typer + Rich)
"""
