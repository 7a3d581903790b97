"""
Module: test_logger_factory.py

Author: Michael Economou
Date: 2026-03-12

Tests for the logger factory, logger helpers and init_logging.
"""

from __future__ import annotations

import logging

import pytest

from exifbridge.utils.logging.init_logging import init_logging
from exifbridge.utils.logging.logger_factory import LoggerFactory, get_cached_logger
from exifbridge.utils.logging.logger_file_helper import add_file_handler
from exifbridge.utils.logging.logger_helper import DevOnlyFilter, safe_text


@pytest.fixture
def clean_root():
    """Restore the root logger handlers and level after the test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestLoggerFactory:
    """Tests for LoggerFactory caching."""

    def test_same_logger_per_name(self) -> None:
        first = get_cached_logger("exifbridge.test.factory")
        second = get_cached_logger("exifbridge.test.factory")

        assert first is second
        assert "exifbridge.test.factory" in LoggerFactory.get_cached_names()

    def test_name_defaults_to_caller_module(self) -> None:
        logger = get_cached_logger()
        assert logger.name == __name__

    def test_loggers_propagate(self) -> None:
        logger = get_cached_logger("exifbridge.test.propagate")
        assert logger.propagate
        assert not logger.handlers

    def test_set_global_level(self) -> None:
        logger = get_cached_logger("exifbridge.test.level")
        try:
            LoggerFactory.set_global_level(logging.ERROR)
            assert logger.level == logging.ERROR
        finally:
            LoggerFactory.set_global_level(logging.NOTSET)


class TestLoggerHelpers:
    def test_safe_text(self) -> None:
        assert safe_text("a → b … c") == "a -> b ... c"
        assert safe_text("one|>☃two") == "one|>*two"

    def test_dev_only_filter(self) -> None:
        """Test that dev_only records are hidden from the console."""
        dev = logging.LogRecord("x", logging.DEBUG, __file__, 1, "dev", None, None)
        dev.dev_only = True
        regular = logging.LogRecord("x", logging.DEBUG, __file__, 1, "regular", None, None)

        log_filter = DevOnlyFilter()

        assert log_filter.filter(dev) is False
        assert log_filter.filter(regular) is True


class TestInitLogging:
    """Tests for init_logging and add_file_handler."""

    def test_console_handler_added_once(self, clean_root) -> None:
        init_logging("exifbridge")
        init_logging("exifbridge", console_level=logging.DEBUG)

        consoles = [h for h in clean_root.handlers if h.get_name() == "exifbridge-console"]
        assert len(consoles) == 1
        assert consoles[0].level == logging.DEBUG
        assert any(isinstance(f, DevOnlyFilter) for f in consoles[0].filters)

    def test_log_files(self, clean_root, tmp_path) -> None:
        """Test that activity and error files are created in log_dir."""
        init_logging("exifbridge", log_dir=str(tmp_path))

        logger = get_cached_logger("exifbridge.test.files")
        logger.info("[Test] activity line")
        logger.error("[Test] error line")
        for handler in clean_root.handlers:
            handler.flush()

        activity = (tmp_path / "exifbridge_activity.log").read_text(encoding="utf-8")
        errors = (tmp_path / "exifbridge_errors.log").read_text(encoding="utf-8")
        assert "activity line" in activity
        assert "error line" in activity
        assert "error line" in errors
        assert "activity line" not in errors

    def test_file_handler_name_filter(self, tmp_path) -> None:
        logger = logging.getLogger("exifbridge.test.filtered")
        logger.setLevel(logging.INFO)
        log_path = tmp_path / "nested" / "filtered.log"
        handler = add_file_handler(
            logger, str(log_path), filter_by_name="exifbridge.test.filtered.keep"
        )
        try:
            logging.getLogger("exifbridge.test.filtered.keep").info("kept")
            logger.info("dropped")
            handler.flush()
        finally:
            logger.removeHandler(handler)
            handler.close()

        content = log_path.read_text(encoding="utf-8")
        assert "kept" in content
        assert "dropped" not in content
