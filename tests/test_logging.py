"""
Tests for logging utilities and configuration.
"""

import json
import logging
import time

import pytest

from kmlkit.core.logging_config import (
    LIBRARY_LOGGER,
    ColoredFormatter,
    JSONFormatter,
    get_log_level,
    get_logger,
    setup_logging,
)
from kmlkit.core.export import write_kml_string
from kmlkit.core.parsers import parse_kml_string
from kmlkit.models import Coord, Folder, Placemark, Point
from kmlkit.utils.logging import PerformanceTimer, log_performance


@pytest.fixture
def library_logger():
    """The kmlkit logger, restored after the test."""
    logger = logging.getLogger(LIBRARY_LOGGER)
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = handlers
    logger.setLevel(level)


def _record(message: str = "Test message", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="kmlkit.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLoggingConfig:
    """Tests for logging configuration."""

    def test_get_log_level(self):
        """Test log level name conversion."""
        assert get_log_level("DEBUG") == logging.DEBUG
        assert get_log_level("INFO") == logging.INFO
        assert get_log_level("WARNING") == logging.WARNING
        assert get_log_level("ERROR") == logging.ERROR
        assert get_log_level("CRITICAL") == logging.CRITICAL
        assert get_log_level("invalid") == logging.INFO  # Default

    def test_get_log_level_case_insensitive(self):
        """Test log level is case insensitive."""
        assert get_log_level("debug") == logging.DEBUG

    def test_setup_logging_console_only(self, library_logger):
        """Test logging setup with console handler only."""
        logger = setup_logging(log_level="DEBUG", enable_console=True)

        assert logger is library_logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_setup_logging_default_level(self, library_logger):
        """Test that the configured default level is used."""
        logger = setup_logging(enable_console=False)
        assert logger.level == logging.INFO
        assert logger.handlers == []

    def test_setup_logging_json_file(self, library_logger, tmp_path):
        """Test JSON file logging."""
        log_file = tmp_path / "logs" / "kmlkit.log"
        setup_logging(log_level="INFO", log_file=log_file, json_logs=True, enable_console=False)

        get_logger("kmlkit.test").info("hello")
        for handler in library_logger.handlers:
            handler.flush()

        lines = log_file.read_text().splitlines()
        assert json.loads(lines[-1])["message"] == "hello"

    def test_setup_logging_is_idempotent(self, library_logger):
        """Test that repeated setup does not stack handlers."""
        setup_logging(enable_console=True)
        setup_logging(enable_console=True)
        assert len(library_logger.handlers) == 1


class TestFormatters:
    """Tests for log formatters."""

    def test_json_formatter(self):
        """Test JSON formatter output."""
        output = JSONFormatter().format(_record())
        data = json.loads(output)

        assert data["level"] == "INFO"
        assert data["logger"] == "kmlkit.test"
        assert data["message"] == "Test message"
        assert data["line"] == 10

    def test_json_formatter_extra_fields(self):
        """Test that extra fields are included."""
        data = json.loads(JSONFormatter().format(_record(duration_ms=12.5, operation="KML read")))

        assert data["duration_ms"] == 12.5
        assert data["operation"] == "KML read"

    def test_colored_formatter_restores_levelname(self):
        """Test that coloring does not leak into the record."""
        record = _record()
        output = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert "\033[32m" in output
        assert record.levelname == "INFO"


class TestPerformanceLogging:
    """Tests for timing helpers."""

    def test_log_performance(self, caplog):
        """Test the timing decorator."""

        @log_performance(log_level=logging.INFO)
        def slow():
            time.sleep(0.01)
            return 42

        with caplog.at_level(logging.INFO, logger=LIBRARY_LOGGER):
            assert slow() == 42

        record = next(r for r in caplog.records if "completed in" in r.message)
        assert record.duration_ms >= 10
        assert record.operation.endswith("slow")

    def test_log_performance_threshold(self, caplog):
        """Test that fast calls under the threshold are not logged."""

        @log_performance(log_level=logging.INFO, threshold_ms=10_000)
        def fast():
            return 1

        with caplog.at_level(logging.INFO, logger=LIBRARY_LOGGER):
            fast()

        assert not any("completed in" in r.message for r in caplog.records)

    def test_performance_timer(self, caplog):
        """Test the timing context manager."""
        with caplog.at_level(logging.DEBUG, logger=LIBRARY_LOGGER):
            with PerformanceTimer("test operation") as timer:
                time.sleep(0.01)

        assert timer.duration_ms >= 10
        assert any("test operation completed" in r.message for r in caplog.records)

    def test_performance_timer_failure(self, caplog):
        """Test that a failing block is logged as failed and re-raised."""
        with caplog.at_level(logging.DEBUG, logger=LIBRARY_LOGGER):
            with pytest.raises(RuntimeError):
                with PerformanceTimer("broken operation"):
                    raise RuntimeError("boom")

        assert any("broken operation failed" in r.message for r in caplog.records)

    def test_performance_timer_count(self, caplog):
        """Test that a reported count is included in the message and extras."""
        with caplog.at_level(logging.DEBUG, logger=LIBRARY_LOGGER):
            with PerformanceTimer("batch", unit="geometries") as timer:
                timer.count = 3

        record = next(r for r in caplog.records if r.message.startswith("batch completed"))
        assert record.message.endswith("(3 geometries)")
        assert record.item_count == 3

    def test_log_performance_count(self, caplog):
        """Test that the decorator derives the count from the return value."""

        @log_performance(log_level=logging.INFO, count=len, unit="points")
        def points():
            return [1, 2]

        with caplog.at_level(logging.INFO, logger=LIBRARY_LOGGER):
            points()

        assert any(r.message.endswith("(2 points)") for r in caplog.records)


class TestLibraryLogging:
    """Tests for messages emitted by readers and writers."""

    def test_read_logs(self, caplog):
        """Test that reading logs a summary and timing."""
        with caplog.at_level(logging.DEBUG, logger=LIBRARY_LOGGER):
            parse_kml_string("<Folder/><Folder/>")

        messages = [r.message for r in caplog.records]
        assert any("2 top-level elements" in m for m in messages)
        assert any("KML read completed" in m and m.endswith("(2 nodes)") for m in messages)

    def test_skip_logged_at_debug(self, caplog):
        """Test that skipped elements are logged."""
        with caplog.at_level(logging.DEBUG, logger=LIBRARY_LOGGER):
            parse_kml_string("<Folder><Region/></Folder>")

        assert any("<Region>" in r.message for r in caplog.records)

    def test_write_logs(self, caplog):
        """Test that writing logs its timing and the number of nodes written."""
        with caplog.at_level(logging.DEBUG, logger=LIBRARY_LOGGER):
            write_kml_string(Folder(elements=[Placemark(geometry=Point(coord=Coord(0.0, 0.0)))]))

        messages = [r.message for r in caplog.records]
        assert any("KML write completed" in m and m.endswith("(3 nodes)") for m in messages)
