"""
Centralized Logging Configuration.

All modules log through structlog loggers from get_logger(). Records go
through stdlib logging so one JSONL file collects both our events and
third-party ones (textual, asyncio). Settings come from the validated
logging section of AppConfig (config/settings/logging.yaml).

Every JSON record carries timestamp, level, logger, event, func_name and
lineno. Front ends tag their records with a source via log_with_source().

Usage:
    from localnotes.core.logging import get_logger, setup_logging

    setup_logging()                                    # from logging.yaml
    setup_logging(level="DEBUG", enable_console=True)  # overrides

    logger = get_logger(__name__)
    logger.info("Note saved", extra={"note_id": "abc"})

Log File:
    logs/system.jsonl: one record per line, filter by 'source'
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from localnotes.core.config import find_project_root, get_app_config
from localnotes.core.config_schema import FileHandlerSchema, LoggingSchema

LOG_SOURCES = frozenset({"cli", "tui"})

_QUIET_LOGGERS = ("textual", "asyncio")


def _resolve_log_path(configured_path: str) -> Path:
    """Resolve a configured log path; relative paths hang off the project root."""
    path = Path(configured_path).expanduser()
    if path.is_absolute():
        return path
    return find_project_root() / path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _file_handler(config: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    log_path = _resolve_log_path(config.path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
    config: LoggingSchema | None = None,
) -> None:
    """
    Configure structlog and the root stdlib logger.

    Keyword arguments override the matching logging.yaml values.

    Args:
        level: Log level name (DEBUG, INFO, ...)
        format_type: Console output format, 'json' or 'console'
        enable_console: Whether to log to stderr
        enable_file_logging: Whether to write the JSONL file
        config: Logging settings to use instead of the loaded logging.yaml
    """
    if config is None:
        config = get_app_config().logging

    log_level = getattr(logging, (level or config.level).upper())
    console_enabled = config.handlers.console.enabled if enable_console is None else enable_console
    file_enabled = config.handlers.file.enabled if enable_file_logging is None else enable_file_logging

    processors = _shared_processors()
    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=processors,
    )

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if console_enabled:
        if (format_type or config.format) == "console":
            console_formatter = structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(colors=True),
                foreign_pre_chain=processors,
            )
        else:
            console_formatter = json_formatter
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if file_enabled:
        root_logger.addHandler(_file_handler(config.handlers.file, json_formatter))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a structlog logger, typically get_logger(__name__)."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message tagged with the front end that caused it.

    Example:
        log_with_source(logger, "cli", "info", "Note deleted", note_id="abc")

    Raises:
        ValueError: If source is not one of LOG_SOURCES
        AttributeError: If level is not a valid log level
    """
    if source not in LOG_SOURCES:
        raise ValueError(f"Unknown log source: {source}")
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
