"""Tests for logging bootstrap."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
import unittest

import structlog

from vending_bus.logging_utils import configure_logging


class ConfigureLoggingTests(unittest.TestCase):
    """Validate configure_logging() handler setup behavior."""

    def setUp(self) -> None:
        # Preserve root logger state so tests do not pollute each other.
        root = logging.getLogger()
        self._original_level = root.level
        self._original_handlers = list(root.handlers)

    def tearDown(self) -> None:
        root = logging.getLogger()
        for handler in root.handlers:
            if handler not in self._original_handlers:
                handler.close()
        root.setLevel(self._original_level)
        root.handlers.clear()
        root.handlers.extend(self._original_handlers)

    def _stream_handlers(self) -> list[logging.Handler]:
        return [
            h
            for h in logging.getLogger().handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]

    def test_configure_logging_adds_stderr_handler(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        self.assertEqual(len(self._stream_handlers()), 1)

    def test_configure_logging_sets_root_level(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        self.assertEqual(logging.getLogger().level, logging.DEBUG)

    def test_console_never_below_warning(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False})
        self.assertEqual(self._stream_handlers()[0].level, logging.WARNING)

    def test_structured_uses_structlog_formatter(self) -> None:
        configure_logging({"level": "INFO", "structured": True, "log_to_file": False})
        formatters = [h.formatter for h in logging.getLogger().handlers]
        self.assertTrue(
            any(isinstance(f, structlog.stdlib.ProcessorFormatter) for f in formatters)
        )

    def test_plain_formatter_when_not_structured(self) -> None:
        configure_logging({"level": "INFO", "structured": False, "log_to_file": False})
        formatters = [h.formatter for h in logging.getLogger().handlers]
        self.assertFalse(
            any(isinstance(f, structlog.stdlib.ProcessorFormatter) for f in formatters)
        )

    def test_structured_output_includes_extra_fields(self) -> None:
        configure_logging({"level": "INFO", "structured": True})
        formatter = self._stream_handlers()[0].formatter
        assert formatter is not None
        record = logging.LogRecord(
            name="vending_bus.events.bus",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="bus.dispatch.aborted",
            args=(),
            exc_info=None,
        )
        record.dropped = 2

        data = json.loads(formatter.format(record))
        self.assertEqual(data["event"], "bus.dispatch.aborted")
        self.assertEqual(data["dropped"], 2)
        self.assertEqual(data["logger"], "vending_bus.events.bus")

    def test_file_handler_created(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = str(Path(tmp) / "nested" / "bus.log")
            configure_logging(
                {
                    "level": "DEBUG",
                    "structured": False,
                    "log_to_file": True,
                    "log_file_path": log_path,
                }
            )
            file_handlers = [
                h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)
            ]
            self.assertEqual(len(file_handlers), 1)
            self.assertTrue(Path(log_path).exists())
            file_handlers[0].close()

    def test_stderr_handler_filters_to_app_loggers(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        handler = self._stream_handlers()[0]
        app_record = logging.LogRecord(
            name="vending_bus.subscribers",
            level=logging.WARNING,
            pathname="",
            lineno=0,
            msg="machine.stock.low",
            args=(),
            exc_info=None,
        )
        other_record = logging.LogRecord(
            name="pydantic",
            level=logging.WARNING,
            pathname="",
            lineno=0,
            msg="noise",
            args=(),
            exc_info=None,
        )
        self.assertTrue(handler.filter(app_record))
        self.assertFalse(handler.filter(other_record))


if __name__ == "__main__":
    unittest.main()
