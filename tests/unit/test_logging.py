"""
Unit tests for logging helpers
"""

import logging

import structlog

from sizefit.utils.logging import (
    LoggingContext,
    add_correlation_id,
    drop_binary_payloads,
    get_logger,
    setup_logging,
)


class TestProcessors:
    """Test custom structlog processors"""

    def test_binary_payload_replaced(self):
        event = drop_binary_payloads(None, "info", {"event": "x", "data": b"\0" * 10})
        assert event["data"] == "<10 bytes>"
        assert event["event"] == "x"

    def test_correlation_id_added(self):
        event = add_correlation_id(None, "info", {"event": "x"})
        assert event["correlation_id"]

    def test_correlation_id_from_context(self):
        with LoggingContext(correlation_id="abc"):
            event = add_correlation_id(None, "info", {"event": "x"})
        assert event["correlation_id"] == "abc"


class TestLoggingContext:
    """Test context binding"""

    def test_binds_and_resets(self):
        with LoggingContext(target=50000):
            assert structlog.contextvars.get_contextvars()["target"] == 50000
        assert "target" not in structlog.contextvars.get_contextvars()

    def test_nested_restores_outer_value(self):
        with LoggingContext(format="png"):
            with LoggingContext(format="webp"):
                assert structlog.contextvars.get_contextvars()["format"] == "webp"
            assert structlog.contextvars.get_contextvars()["format"] == "png"


class TestSetupLogging:
    """Test logging configuration"""

    def test_sets_root_level(self):
        setup_logging(log_level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_json_logs(self, capsys):
        setup_logging(log_level="INFO", json_logs=True)
        get_logger("sizefit.test").info("probe", size=123)

        captured = capsys.readouterr()
        assert '"event": "probe"' in captured.err
        assert '"size": 123' in captured.err
