"""Tests for tsengine.core.logging."""

import json

import structlog

from tsengine.core.logging import LogContext, configure_logging, get_logger


class TestConfigureLogging:
    """JSON output goes to stderr with ECS-style field names."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_json_to_stderr(self, capsys):
        """JSON mode emits one object per event on stderr."""
        configure_logging(level="INFO", json_format=True, service="tsengine-test")
        get_logger("tests.logging").info("series_query_completed", total_points=3)

        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "series_query_completed"
        assert event["log.level"] == "info"
        assert event["service.name"] == "tsengine-test"
        assert event["logger"] == "tests.logging"
        assert event["total_points"] == 3

    def test_level_filtering(self, capsys):
        """Events below the configured level are dropped."""
        configure_logging(level="WARNING", json_format=True)
        get_logger().info("hidden")
        assert capsys.readouterr().err == ""

    def test_log_context_binds_and_unbinds(self, capsys):
        """LogContext fields appear only inside the block."""
        configure_logging(level="INFO", json_format=True)
        logger = get_logger()
        with LogContext(series_id="US.GDP"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = (json.loads(line) for line in capsys.readouterr().err.strip().splitlines())
        assert inside["series_id"] == "US.GDP"
        assert "series_id" not in outside


class TestLazyLogger:
    """Loggers obtained before configure_logging pick up the later configuration."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_early_logger_follows_later_config(self, capsys):
        """A module-level logger writes to stderr at the configured level."""
        structlog.reset_defaults()
        early = get_logger("tests.early")
        configure_logging(level="WARNING", json_format=True)

        early.info("dropped")
        early.warning("kept")

        captured = capsys.readouterr()
        assert captured.out == ""
        lines = captured.err.strip().splitlines()
        assert len(lines) == 1
        event = json.loads(lines[0])
        assert event["event"] == "kept"
        assert event["logger"] == "tests.early"
