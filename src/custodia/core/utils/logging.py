"""
Logging configuration using loguru.

Library code logs through ``loguru.logger`` directly; applications (and the
``custodia`` CLI) call configure_logging() once at startup to choose sinks
from the ``logging.*`` and ``paths.log_dir`` settings.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from custodia.core.config import Config

_CONSOLE_FORMAT = "<level>[{level.name}]</level> {message}"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    fmt: str = _CONSOLE_FORMAT,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Replace loguru's sinks with a stderr sink and an optional rotating file.

    Args:
        level: Minimum log level, case-insensitive (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None or empty, only logs to stderr.
        fmt: Loguru format string for the console sink.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=fmt)

    if log_file:
        # loguru creates missing parent directories
        logger.add(log_file, level=level, format=_FILE_FORMAT, rotation=rotation, retention=retention)


def configure_logging(config: Config, level: str | None = None) -> str | None:
    """Set up sinks from *config*; *level* overrides ``logging.level``.

    Returns the resolved log file path, or None when logging only to stderr.
    """
    log_file = config.get_log_file()
    setup_logging(
        level=level or config.get("logging.level", "WARNING"),
        log_file=log_file,
        rotation=config.get("logging.rotation", "10 MB"),
        retention=config.get("logging.retention", "7 days"),
    )
    if log_file:
        logger.debug(f"Logging to {log_file}")
    return log_file
