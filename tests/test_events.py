"""Unit tests for event sinks."""

import logging

from botguard.events import LoggingEventSink, NullEventSink


class TestLoggingEventSink:
    def test_violation_logged_as_warning(self, caplog):
        with caplog.at_level(logging.INFO, logger="botguard.events"):
            LoggingEventSink().emit("violation", "198.51.100.7", rule="BG-003", count=2)
        record = caplog.records[0]
        assert record.levelno == logging.WARNING
        assert "[VIOLATION] identity=198.51.100.7" in record.getMessage()
        assert "count=2 rule=BG-003" in record.getMessage()

    def test_bookkeeping_logged_as_info(self, caplog):
        with caplog.at_level(logging.INFO, logger="botguard.events"):
            LoggingEventSink().emit("reset", "a", removed=True)
        assert caplog.records[0].levelno == logging.INFO


class TestNullEventSink:
    def test_discards(self, caplog):
        with caplog.at_level(logging.DEBUG):
            NullEventSink().emit("block", "a", action="TEMP_BLOCK")
        assert caplog.records == []
