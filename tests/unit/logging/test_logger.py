# tests/unit/logging/test_logger.py - v1
"""Tests for logging/logger.py - logger factory and formatters."""

from __future__ import annotations

import json
import logging

from floodgate.logging.context import clear_context, set_batch_context, set_job_context
from floodgate.logging.logger import JsonFormatter, TextFormatter, get_logger, setup_logging


def _record(msg: str = "Hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_job_context("/pink", action="promote-worker")
        set_batch_context(2)
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["context"] == {
            "root_folder": "/pink", "batch_number": 2, "action": "promote-worker",
        }

    def test_format_with_data(self):
        record = _record()
        record.data = {"files": 3}
        parsed = json.loads(JsonFormatter().format(record))
        assert parsed["data"] == {"files": 3}


class TestTextFormatter:
    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_batch(self):
        set_job_context("/pink", action="promote-worker")
        set_batch_context(0)
        output = TextFormatter().format(_record())
        assert "[promote-worker]" in output
        assert "(batch 0)" in output


class TestGetLogger:
    def test_returns_logger(self):
        assert get_logger("test_module").name == "floodgate.test_module"


class TestSetupLogging:
    def test_text_format(self):
        setup_logging(level="DEBUG", log_format="text")
        root = logging.getLogger("floodgate")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_no_duplicate_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("floodgate").handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "floodgate.log"
        setup_logging(log_file=str(log_file))
        root = logging.getLogger("floodgate")
        assert len(root.handlers) == 2
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()
