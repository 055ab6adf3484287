"""
Configuration Management.

Loads settings from config/settings/*.yaml and environment overrides from
LOCALNOTES_* variables (optionally config/.env).
No hardcoded values in code; all configuration comes from these sources.

Settings (YAML):
    application.yaml   - App identity
    logging.yaml       - Logging configuration
    storage.yaml       - Durable store backend, data directory, blob key
    editor.yaml        - Autosave, search debounce, list preview length

Environment overrides (.env / process environment):
    LOCALNOTES_DATA_DIR, LOCALNOTES_STORAGE_BACKEND
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from localnotes.core.config_schema import (
    ApplicationSchema,
    EditorSchema,
    LoggingSchema,
    StorageSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Environment overrides. Unset values fall back to the YAML settings."""

    data_dir: str | None = None
    storage_backend: Literal["file", "memory"] | None = None

    model_config = SettingsConfigDict(
        env_prefix="LOCALNOTES_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.

    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._storage = _load_validated(StorageSchema, "storage.yaml")
        self._editor = _load_validated(EditorSchema, "editor.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def storage(self) -> StorageSchema:
        """Durable store settings."""
        return self._storage

    @property
    def editor(self) -> EditorSchema:
        """Editor behaviour settings (autosave, search, previews)."""
        return self._editor


@lru_cache
def get_settings() -> Settings:
    """Get cached environment overrides. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_storage_backend() -> str:
    """Return the effective storage backend ('file' or 'memory')."""
    override = get_settings().storage_backend
    return override if override is not None else get_app_config().storage.backend


def get_data_dir() -> Path:
    """
    Resolve the directory holding the note blob.

    LOCALNOTES_DATA_DIR wins over storage.yaml. Relative paths are
    resolved against the project root.

    Returns:
        Absolute path to the data directory (not created here).
    """
    configured = get_settings().data_dir or get_app_config().storage.data_dir
    path = Path(configured).expanduser()
    if not path.is_absolute():
        path = find_project_root() / path
    return path
