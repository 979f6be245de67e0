"""Tests for utility helpers."""

import logging

import pytest
import structlog

from ..utils.formatting import format_number
from ..utils.logging import setup_logging


class TestFormatNumber:
    """Test number rendering."""

    @pytest.mark.parametrize("value,expected", [
        (12.0, "12"),
        (60.5, "60.5"),
        (-0.25, "-0.25"),
        (102.4, "102.4"),
        (7, "7"),
    ])
    def test_format(self, value, expected):
        assert format_number(value) == expected


class TestSetupLogging:
    """Test logging configuration."""

    def teardown_method(self):
        structlog.reset_defaults()
        logging.basicConfig(force=True, handlers=[logging.NullHandler()])

    def test_log_file_written(self, tmp_path):
        """Events go to the log file as JSON lines."""
        log_file = tmp_path / "logs" / "collector.log"

        setup_logging(level="INFO", log_file=log_file, json_logs=True)
        structlog.get_logger("aishub_collector.test").info("Collector started", cycle=1)
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert '"event": "Collector started"' in content
        assert '"cycle": 1' in content

    def test_httpx_request_logs_suppressed(self):
        setup_logging(level="DEBUG", json_logs=False)

        assert logging.getLogger("httpx").level == logging.WARNING
