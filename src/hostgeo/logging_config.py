"""Logging setup for the hostgeo command line."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMATS = {
    "simple": "%(levelname)s - %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
}

# Chatty third-party loggers kept at WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


class ColoredFormatter(logging.Formatter):
    """Colour the level name with ANSI codes."""

    LEVEL_COLOURS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        colour = self.LEVEL_COLOURS.get(record.levelno)
        if colour is None:
            return super().format(record)
        # Work on a copy so other handlers still see the plain level name
        coloured = logging.makeLogRecord(record.__dict__)
        coloured.levelname = f"{colour}{record.levelname}{self.RESET}"
        return super().format(coloured)


def resolve_level(level: str | int) -> int:
    """Map a level name such as ``"debug"`` to its number; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: str | int = "INFO",
    *,
    log_file: Optional[str | Path] = None,
    log_format: str = "simple",
    use_color: Optional[bool] = None,
) -> None:
    """
    Route hostgeo logs to stderr and, optionally, a file.

    Args:
        level: Level name or number for the root logger.
        log_file: Also append records to this file (plain, never coloured).
        log_format: Key of LOG_FORMATS.
        use_color: Colour stderr output; None colours only when stderr is a TTY.
    """
    numeric_level = resolve_level(level)
    fmt = LOG_FORMATS.get(log_format, LOG_FORMATS["simple"])
    if use_color is None:
        use_color = sys.stderr.isatty()

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter(fmt) if use_color else logging.Formatter(fmt))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(fmt))
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
