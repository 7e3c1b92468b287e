"""
Diagnostics logging and stdlib/structlog bridge tests.
"""

from __future__ import annotations

import io
import logging

import orjson
import pytest
import structlog

from conftest import RecordingSink
from fanlog.levels import Severity
from fanlog.logging import configure_logging, get_logger
from fanlog.logging.interceptors import (
    MultiSinkHandler,
    attach_to_stdlib,
    multi_sink_processor,
    severity_from_stdlib,
)
from fanlog.multi import MultiSink


@pytest.fixture
def bridged_logger():
    logger = logging.getLogger("tests.bridge")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield logger
    logger.handlers = []
    logger.propagate = True


class TestConfigureLogging:
    def test_json_output(self) -> None:
        stream = io.StringIO()
        configure_logging(level="DEBUG", fmt="json", stream=stream)
        get_logger("fanlog.test").info("sink_ready", sink="slack")

        data = orjson.loads(stream.getvalue())
        assert data["message"] == "sink_ready"
        assert data["level"] == "info"
        assert data["logger"] == "fanlog.test"
        assert data["sink"] == "slack"

    def test_console_output(self) -> None:
        stream = io.StringIO()
        configure_logging(level="INFO", fmt="console", stream=stream)
        get_logger("fanlog.dispatch").warning("sink_dispatch_failed", sink="slack")

        line = stream.getvalue()
        assert "WARNING" in line
        assert "fanlog.dispatch" in line
        assert "sink_dispatch_failed sink=slack" in line

    def test_level_filter(self) -> None:
        stream = io.StringIO()
        configure_logging(level="ERROR", fmt="json", stream=stream)
        get_logger().info("hidden")
        assert stream.getvalue() == ""


class TestMultiSinkHandler:
    def test_stdlib_records_fan_out(self, bridged_logger) -> None:
        sink = RecordingSink()
        bridged_logger.addHandler(MultiSinkHandler(MultiSink(sinks=[sink])))

        bridged_logger.warning("disk at %d%%", 91)

        record = sink.records[0]
        assert record.message == "disk at 91%"
        assert record.severity is Severity.WARNING
        assert record.context["logger"] == "tests.bridge"

    def test_exception_info_is_forwarded(self, bridged_logger) -> None:
        sink = RecordingSink()
        bridged_logger.addHandler(MultiSinkHandler(sink))
        try:
            raise ValueError("nope")
        except ValueError:
            bridged_logger.exception("failed")
        assert isinstance(sink.records[0].context["exception"], ValueError)
        assert sink.records[0].severity is Severity.ERROR

    def test_internal_namespace_is_skipped(self) -> None:
        sink = RecordingSink()
        handler = MultiSinkHandler(sink)
        record = logging.LogRecord("fanlog.dispatch", logging.ERROR, __file__, 1, "x", (), None)
        handler.emit(record)
        assert sink.records == []

    def test_primary_stdlib_logger_does_not_loop(self, caplog) -> None:
        root_sink = RecordingSink("fanout")
        multi = MultiSink(primary=logging.getLogger("tests.loop.primary"), sinks=[root_sink])
        handler = attach_to_stdlib(multi, logging.getLogger("tests.loop"))
        try:
            with caplog.at_level(logging.INFO):
                logging.getLogger("tests.loop.app").error("once")
        finally:
            logging.getLogger("tests.loop").removeHandler(handler)

        assert [r.message for r in root_sink.records] == ["once"]
        assert [r.getMessage() for r in caplog.records if r.name == "tests.loop.primary"] == ["once"]

    @pytest.mark.parametrize(
        ("levelno", "expected"),
        [(5, Severity.DEBUG), (25, Severity.INFO), (35, Severity.WARNING), (45, Severity.ERROR), (60, Severity.CRITICAL)],
    )
    def test_custom_stdlib_levels(self, levelno, expected) -> None:
        assert severity_from_stdlib(levelno) is expected


class TestMultiSinkProcessor:
    def test_forwards_and_passes_event_through(self) -> None:
        sink = RecordingSink()
        processor = multi_sink_processor(sink)
        event = {"event": "user_created", "level": "info", "logger": "app.users", "user_id": 5}

        assert processor(None, "info", dict(event)) == event
        record = sink.records[0]
        assert record.message == "user_created"
        assert record.severity is Severity.INFO
        assert dict(record.context) == {"user_id": 5, "logger": "app.users"}

    def test_exception_method_maps_to_error(self) -> None:
        sink = RecordingSink()
        multi_sink_processor(sink)(None, "exception", {"event": "boom", "level": "exception"})
        assert sink.records[0].severity is Severity.ERROR

    def test_skips_diagnostics(self) -> None:
        sink = RecordingSink()
        multi_sink_processor(sink)(None, "warning", {"event": "sink_emit_failed", "_name": "fanlog.sinks"})
        assert sink.records == []

    def test_in_structlog_chain(self) -> None:
        sink = RecordingSink()
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                multi_sink_processor(MultiSink(sinks=[sink])),
                structlog.processors.KeyValueRenderer(),
            ],
            logger_factory=structlog.PrintLoggerFactory(file=io.StringIO()),
        )
        structlog.get_logger().error("payment_failed", order=3)
        assert sink.records[0].message == "payment_failed"
        assert sink.records[0].context["order"] == 3
