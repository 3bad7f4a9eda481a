from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest

from hostgeo.logging_config import (
    LOG_FORMATS,
    QUIET_LOGGERS,
    ColoredFormatter,
    resolve_level,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def make_record(level=logging.INFO, message="Info message"):
    return logging.LogRecord("test", level, "/path/to/file.py", 10, message, (), None)


def test_colored_formatter_colours_level_name():
    formatter = ColoredFormatter("%(levelname)s - %(message)s")
    assert formatter.format(make_record()) == "\033[32mINFO\033[0m - Info message"


def test_colored_formatter_leaves_record_untouched():
    """Other handlers formatting the same record must not see ANSI codes."""
    record = make_record(logging.ERROR)
    ColoredFormatter("%(levelname)s").format(record)
    assert record.levelname == "ERROR"


def test_colored_formatter_with_custom_level():
    formatted = ColoredFormatter("%(levelname)s: %(message)s").format(make_record(15))
    assert "\033[" not in formatted


@pytest.mark.parametrize(
    "level, expected",
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), (logging.ERROR, logging.ERROR), ("nope", logging.INFO)],
)
def test_resolve_level(level, expected):
    assert resolve_level(level) == expected


@patch("hostgeo.logging_config.logging.getLogger")
def test_setup_logging_quiets_http_loggers(mock_get_logger):
    loggers = {}
    mock_get_logger.side_effect = lambda name=None: loggers.setdefault(name, MagicMock(handlers=[]))

    setup_logging(level="DEBUG", use_color=False)

    loggers[None].setLevel.assert_called_with(logging.DEBUG)
    assert loggers[None].addHandler.call_count == 1
    for name in QUIET_LOGGERS:
        loggers[name].setLevel.assert_called_with(logging.WARNING)


def test_setup_logging_writes_plain_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "hostgeo.log"

    setup_logging("INFO", log_file=log_file, log_format="detailed", use_color=True)
    logging.getLogger("hostgeo.test").warning("disk almost full")

    content = log_file.read_text(encoding="utf-8")
    assert "hostgeo.test - WARNING - [" in content
    assert "disk almost full" in content
    assert "\033[" not in content


def test_setup_logging_replaces_previous_handlers(restore_root_logger):
    setup_logging("INFO", use_color=False)
    setup_logging("INFO", use_color=False)
    assert len(restore_root_logger.handlers) == 1


def test_unknown_format_falls_back_to_simple(restore_root_logger):
    setup_logging("INFO", log_format="fancy", use_color=False)
    assert restore_root_logger.handlers[0].formatter._fmt == LOG_FORMATS["simple"]
