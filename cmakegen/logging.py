"""Logger setup for the cmakegen command line."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .errors import FilesystemAccessError

_LOGGER_NAME = "cmakegen"
_CONSOLE_FORMAT = "[cmakegen] %(message)s"
_CONSOLE_ALERT_FORMAT = "[cmakegen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConsoleFormatter(logging.Formatter):
    """Plain progress lines; the level is only spelled out for warnings and errors.

    The degraded no-sources run logs at WARNING, so it stands out from a
    normal scan in terminal output.
    """

    def __init__(self) -> None:
        super().__init__(_CONSOLE_FORMAT)
        self._alert = logging.Formatter(_CONSOLE_ALERT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            return self._alert.format(record)
        return super().format(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the cmakegen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def reset_logging() -> None:
    """Detach and close every handler installed on the cmakegen logger."""
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send cmakegen logs to stderr and, optionally, a log file.

    Raises FilesystemAccessError when ``log_file`` cannot be opened.
    """
    level = logging.DEBUG if verbose else logging.INFO
    reset_logging()

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(ConsoleFormatter())
    logger.addHandler(console)

    if log_file is not None:
        try:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            raise FilesystemAccessError(f"Cannot open log file {log_file}: {exc}") from exc
        # The file always records debug detail, whatever the console shows.
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["ConsoleFormatter", "configure_logging", "get_logger", "reset_logging"]
