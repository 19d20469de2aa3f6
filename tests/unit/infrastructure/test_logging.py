"""Unit tests for structlog configuration."""

import logging
from unittest.mock import patch

import structlog

from infrastructure.logging import configure_logging


class TestConfigureLogging:
    """Tests for configure_logging."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_json_output_without_tty(self, monkeypatch):
        """Non-interactive runs render JSON."""
        monkeypatch.delenv("FORCE_COLOR", raising=False)

        with patch("sys.stdout.isatty", return_value=False):
            configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_force_color_uses_console(self, monkeypatch):
        """FORCE_COLOR selects the console renderer."""
        monkeypatch.setenv("FORCE_COLOR", "1")

        configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_level_filters_lower_events(self, monkeypatch):
        """The configured level is the minimum emitted."""
        monkeypatch.delenv("FORCE_COLOR", raising=False)

        with patch("sys.stdout.isatty", return_value=False):
            configure_logging("warning")

        wrapper = structlog.get_config()["wrapper_class"]
        assert wrapper is structlog.make_filtering_bound_logger(logging.WARNING)
