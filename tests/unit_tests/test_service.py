"""
build_logger and sink registry tests.
"""

from __future__ import annotations

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from conftest import RawExplodingLogger, RecordingSink
from fanlog.clients import SlackWebhookClient
from fanlog.exceptions import ConfigurationError, FanlogError, MissingClientError, UnknownSinkError
from fanlog.levels import Severity
from fanlog.multi import REQUEST_ID_KEY
from fanlog.registry import available_sinks, get_sink_factory, register_sink, unregister_sink
from fanlog.service import build_logger
from fanlog.sinks.sentry import SentrySink
from fanlog.sinks.slack import SlackSink
from fanlog.sinks.stdio import StdioSink
from fanlog.sinks.stdlib import StdlibLoggerSink


class TestBuildLogger:
    def test_default_config_builds_slack_only(self, chat_client) -> None:
        multi = build_logger({"environment": "prod"}, chat_client=chat_client)
        assert [type(s) for s in multi] == [SlackSink]

    def test_sentry_before_slack_and_wired_for_links(self, chat_client, error_tracker) -> None:
        multi = build_logger(
            {"environment": "prod", "sentry": {"enabled": True}},
            chat_client=chat_client,
            error_tracker=error_tracker,
        )
        assert [s.name for s in multi] == ["sentry", "slack"]

        multi.error("db down")
        assert error_tracker.messages[0][0] == "db down"
        assert chat_client.payloads[0]["text"].endswith("query=evt1|sentry>")

    def test_configured_order_is_dispatch_order(self, chat_client, error_tracker) -> None:
        multi = build_logger(
            {"environment": "prod", "sinks": ["slack", "sentry"], "sentry": {"enabled": True}},
            chat_client=chat_client,
            error_tracker=error_tracker,
        )
        assert [s.name for s in multi] == ["slack", "sentry"]

    def test_primary_logger_first(self, chat_client) -> None:
        primary = RecordingSink("primary")
        multi = build_logger({"environment": "prod"}, primary=primary, chat_client=chat_client)
        assert multi.sinks[0] is primary

    def test_stdlib_primary_is_wrapped(self, chat_client) -> None:
        multi = build_logger({"environment": "prod"}, primary=logging.getLogger("app"), chat_client=chat_client)
        assert isinstance(multi.sinks[0], StdlibLoggerSink)

    def test_request_id_from_config(self) -> None:
        primary = RecordingSink("primary")
        multi = build_logger(
            {"environment": "prod", "request_id": "req-7", "slack": {"enabled": False}},
            primary=primary,
        )
        multi.info("x")
        assert primary.records[0].context[REQUEST_ID_KEY] == "req-7"

    def test_levels_from_config(self, chat_client) -> None:
        multi = build_logger({"environment": "prod", "slack": {"level": "warning"}}, chat_client=chat_client)
        multi.notice("skipped")
        multi.warning("sent")
        assert [p["text"] for p in chat_client.payloads] == ["[WARNING] sent"]

    def test_disabled_sinks_are_skipped(self) -> None:
        multi = build_logger({"environment": "prod", "slack": {"enabled": False}})
        assert len(multi) == 0

    def test_stdio_sink(self) -> None:
        multi = build_logger(
            {"environment": "dev", "sinks": ["stdio"], "stdio": {"enabled": True, "format": "json"}}
        )
        assert isinstance(multi.sinks[0], StdioSink)
        assert multi.sinks[0].level is Severity.DEBUG

    def test_webhook_url_builds_client(self) -> None:
        multi = build_logger({"environment": "prod", "slack": {"webhook_url": "https://hooks.example/x"}})
        slack = multi.find("slack")
        assert isinstance(slack, SlackSink)
        assert isinstance(slack._client, SlackWebhookClient)
        multi.close()


class TestDiagnosticsDefaults:
    def test_setup_chatter_is_not_printed(self, capsys, chat_client) -> None:
        build_logger({"environment": "prod"}, chat_client=chat_client)

        captured = capsys.readouterr()
        assert "fanout_logger_built" not in captured.out + captured.err
        assert structlog.is_configured()

    def test_dispatch_failures_reach_stderr(self, capsys) -> None:
        multi = build_logger({"environment": "prod", "slack": {"enabled": False}}, primary=RawExplodingLogger())
        multi.error("boom")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "sink_dispatch_failed" in captured.err

    def test_existing_structlog_configuration_is_kept(self, chat_client) -> None:
        with capture_logs() as logs:
            build_logger({"environment": "prod"}, chat_client=chat_client)
        assert [e["event"] for e in logs] == ["sink_disabled", "fanout_logger_built"]


class TestSetupErrors:
    def test_missing_environment(self, chat_client) -> None:
        with pytest.raises(ConfigurationError):
            build_logger({"slack": {"level": "error"}}, chat_client=chat_client)

    def test_missing_chat_client(self) -> None:
        with pytest.raises(MissingClientError) as exc_info:
            build_logger({"environment": "prod"})
        assert exc_info.value.details["sink"] == "slack"

    def test_missing_error_tracker(self, chat_client) -> None:
        with pytest.raises(MissingClientError):
            build_logger({"environment": "prod", "sentry": {"enabled": True}}, chat_client=chat_client)

    def test_duplicate_sink_is_not_built_twice(self, chat_client) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            build_logger({"environment": "prod", "sinks": ["slack", "slack"]}, chat_client=chat_client)
        assert exc_info.value.details["errors"][0]["field"] == "sinks"
        assert chat_client.payloads == []

    def test_malformed_environment_variable(self, monkeypatch, chat_client) -> None:
        monkeypatch.setenv("FANLOG_ENVIRONMENT", "prod")
        monkeypatch.setenv("FANLOG_SINKS", "stdio,slack")
        with pytest.raises(FanlogError):
            build_logger(chat_client=chat_client)

    def test_unknown_sink(self) -> None:
        with pytest.raises(UnknownSinkError) as exc_info:
            build_logger({"environment": "prod", "sinks": ["pager"]})
        assert exc_info.value.code == "UNKNOWN_SINK"
        assert isinstance(exc_info.value, ConfigurationError)


class TestRegistry:
    def test_builtins(self) -> None:
        assert {"slack", "sentry", "stdio"} <= set(available_sinks())

    def test_custom_sink_registration(self) -> None:
        built: list[RecordingSink] = []

        def factory(settings, services):
            sink = RecordingSink("pager", level=Severity.CRITICAL)
            built.append(sink)
            return sink

        register_sink("pager", factory)
        try:
            multi = build_logger({"environment": "prod", "sinks": ["pager"]})
            multi.critical("page me")
            multi.error("not me")
            assert [r.message for r in built[0].records] == ["page me"]
        finally:
            unregister_sink("pager")

        with pytest.raises(UnknownSinkError):
            get_sink_factory("pager")

    def test_sentry_factory_carries_environment(self, error_tracker) -> None:
        from fanlog.config import load_settings
        from fanlog.registry import SinkServices

        settings = load_settings({"environment": "qa", "sentry": {"level": "warning"}})
        sink = get_sink_factory("sentry")(settings, SinkServices(error_tracker=error_tracker))
        assert isinstance(sink, SentrySink)
        assert sink.environment == "qa"
        assert sink.level is Severity.WARNING
