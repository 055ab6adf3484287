"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    LoggingSchema      → logging.yaml
    StorageSchema      → storage.yaml
    EditorSchema       → editor.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from localnotes.core.utils import unicode_codec


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: Literal["json", "console"]
    handlers: HandlersSchema


# =============================================================================
# storage.yaml
# =============================================================================


class StorageSchema(_StrictBase):
    backend: Literal["file", "memory"]
    data_dir: str
    key: str = Field(pattern=r"^[A-Za-z0-9._-]+$")
    encoding: str

    @field_validator("encoding")
    @classmethod
    def _unicode_only(cls, value: str) -> str:
        return unicode_codec(value)


# =============================================================================
# editor.yaml
# =============================================================================


class AutosaveSchema(_StrictBase):
    enabled: bool
    interval_seconds: float = Field(ge=1.0)


class EditorSchema(_StrictBase):
    autosave: AutosaveSchema
    save_on_blur: bool
    search_debounce_ms: int = Field(ge=0)
    preview_length: int = Field(ge=2)
