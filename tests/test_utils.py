"""Tests for utility functions."""

import os
import logging
import tempfile

import pytest

from pixelprism.utils import (
    setup_logging, get_logger, clamp, default_log_level, LOG_LEVEL_ENV
)


class TestLoggingSetup:
    """Test logging setup functions."""

    def test_setup_logging_default(self):
        """Test basic logging setup."""
        logger = setup_logging()

        assert logger.name == "pixelprism"
        assert logger.level == logging.INFO
        assert len(logger.handlers) > 0

    def test_setup_logging_with_level(self):
        """Test logging setup with custom level."""
        logger = setup_logging(level="DEBUG")

        assert logger.level == logging.DEBUG

    def test_setup_logging_unknown_level(self):
        logger = setup_logging(level="chatty")

        assert logger.level == logging.INFO

    def test_setup_logging_with_file(self):
        """Test logging setup with file handler."""
        with tempfile.NamedTemporaryFile(delete=False) as f:
            log_file = f.name

        try:
            logger = setup_logging(log_file=log_file, console=False)
            logger.info("hello from the test")
            for handler in logger.handlers:
                handler.flush()

            assert len(logger.handlers) == 1
            with open(log_file, encoding="utf-8") as f:
                assert "hello from the test" in f.read()
        finally:
            for handler in logging.getLogger("pixelprism").handlers:
                handler.close()
            logging.getLogger("pixelprism").handlers.clear()
            os.unlink(log_file)

    def test_setup_logging_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()

        assert len(logger.handlers) == 1

    def test_get_logger(self):
        """Test logger retrieval."""
        assert get_logger().name == "pixelprism"
        assert get_logger("pixelprism.config").name == "pixelprism.config"


class TestDefaultLogLevel:
    """Test the environment driven log level."""

    def test_unset(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert default_log_level() == "INFO"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
        assert default_log_level() == "DEBUG"

    def test_invalid(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "loud")
        assert default_log_level() == "INFO"


class TestClamp:
    """Test the clamp helper."""

    @pytest.mark.parametrize("val,expected", [(-1, 0), (0, 0), (0.5, 0.5), (1, 1), (2, 1)])
    def test_clamp(self, val, expected):
        assert clamp(val, 0, 1) == expected
