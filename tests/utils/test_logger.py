"""Tests for the application logger."""

from __future__ import annotations

import logging
import logging.handlers

import pytest

from terminal_tasks.utils.logger import get_logger, set_level


def file_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]


def test_logs_to_rotating_file(tmp_path):
    logger = get_logger()
    handlers = file_handlers(logger)
    assert len(handlers) == 1

    logger.info("hello from the test")
    handlers[0].flush()

    content = (tmp_path / "logs" / "tasks.log").read_text(encoding="utf-8")
    assert "hello from the test" in content
    assert "INFO" in content


def test_file_handler_added_next_to_existing_handlers(tmp_path):
    other = logging.NullHandler()
    logging.getLogger("terminal_tasks").addHandler(other)

    logger = get_logger()

    assert other in logger.handlers
    assert len(file_handlers(logger)) == 1
    logger.warning("still written")
    file_handlers(logger)[0].flush()
    assert "still written" in (tmp_path / "logs" / "tasks.log").read_text(encoding="utf-8")


def test_singleton():
    assert get_logger() is get_logger()


def test_does_not_propagate():
    assert get_logger().propagate is False


@pytest.mark.parametrize(
    "level, expected", [("warning", logging.WARNING), (logging.DEBUG, logging.DEBUG)]
)
def test_set_level(level, expected):
    set_level(level)
    assert get_logger().level == expected


def test_set_level_rejects_unknown():
    with pytest.raises(ValueError):
        set_level("LOUD")
