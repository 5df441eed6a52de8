"""Logging utilities for Flake.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to stderr or a log file. Each logger is
self-contained and does not modify global structlog configuration.
"""

import logging
import sys
from functools import cache
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]


def _get_log_level() -> int:
    """Get the log level from environment variables.

    Checks FLAKE_DEBUG first (sets DEBUG if present), then FLAKE_LOG_LEVEL.
    Defaults to INFO if neither is set.

    Returns:
        The logging level as an integer.
    """
    if getenv("FLAKE_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(getenv("FLAKE_LOG_LEVEL", "info").upper(), logging.INFO)


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, FLAKE_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("FLAKE_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def create_logger(
    level: str | None = None,
    *,
    log_format: LogFormatType = "text",
    log_file: str = "",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger.

    The log level is determined by (in order of precedence):
    1. FLAKE_DEBUG environment variable (if set, enables DEBUG level)
    2. The `level` parameter (if provided)
    3. FLAKE_LOG_LEVEL environment variable
    4. Default: INFO

    Args:
        level: Optional log level string (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to the log file (opened in append mode). Logs go to
            stderr when empty.
        max_bytes: Maximum size in bytes before rotation. Must be set with
            backup_count for rotation to be enabled.
        backup_count: Number of rotated log files to keep. Must be set with
            max_bytes for rotation to be enabled.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    effective_level = (
        _log_level_from_string(level, respect_env=True)
        if level is not None
        else _get_log_level()
    )

    # Rotation needs a stdlib handler; everything else writes directly
    raw_logger: object
    if log_file and max_bytes is not None and backup_count is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        stdlib_logger = logging.getLogger(f"flake.{log_path.stem}.{id(log_path)}")
        stdlib_logger.handlers.clear()
        stdlib_logger.propagate = False
        stdlib_logger.setLevel(effective_level)

        handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        handler.setLevel(effective_level)
        # structlog renders the message; the handler only writes it
        handler.setFormatter(logging.Formatter("%(message)s"))
        stdlib_logger.addHandler(handler)
        raw_logger = stdlib_logger
    elif log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        raw_logger = structlog.WriteLoggerFactory(file=log_path.open("a"))()
    else:
        raw_logger = structlog.PrintLoggerFactory(file=sys.stderr)()

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        # Add dict_tracebacks for structured exception logging in JSON
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(effective_level)

    # wrap_logger leaves the global structlog configuration untouched
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )


@cache
def get_logger() -> "FilteringBoundLogger":  # noqa: UP037
    """Return the shared default logger (text format, stderr).

    Views and engines created without an explicit logger use this one.
    """
    return create_logger()
