from __future__ import annotations

import typing as t

import pytest
import structlog

from fanlog.levels import Severity
from fanlog.record import LogRecord
from fanlog.sinks.base import BaseSink


class RecordingSink(BaseSink):
    """Keeps every emitted record; optionally appends its name to a shared call log."""

    def __init__(self, name: str = "recording", *, level=Severity.DEBUG, calls: list[str] | None = None, **kwargs):
        super().__init__(level=level, name=name, **kwargs)
        self.records: list[LogRecord] = []
        self.calls = calls

    def emit(self, record: LogRecord) -> None:
        self.records.append(record)
        if self.calls is not None:
            self.calls.append(self.name)


class ExplodingSink(BaseSink):
    """Backend that always fails."""

    def __init__(self, name: str = "exploding", *, calls: list[str] | None = None):
        super().__init__(name=name)
        self.calls = calls

    def emit(self, record: LogRecord) -> None:
        if self.calls is not None:
            self.calls.append(self.name)
        raise ConnectionError("backend unreachable")


class RawExplodingLogger:
    """A Logger that is not a BaseSink, so nothing contains its failure but the dispatcher."""

    name = "raw"

    def __init__(self, calls: list[str] | None = None):
        self.calls = calls

    def log(self, message, severity, timestamp=None, context=None) -> None:
        if self.calls is not None:
            self.calls.append(self.name)
        raise RuntimeError("raw logger failed")


class FakeChatClient:
    def __init__(self) -> None:
        self.payloads: list[dict[str, t.Any]] = []

    def send(self, payload: t.Mapping[str, t.Any]) -> None:
        self.payloads.append(dict(payload))


class FakeErrorTracker:
    """Sentry-like hub: every capture produces a new event id."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str | None, dict[str, t.Any]]] = []
        self.exceptions: list[tuple[BaseException | None, dict[str, t.Any]]] = []
        self._last: str | None = None
        self._counter = 0

    def _next_id(self) -> str:
        self._counter += 1
        self._last = f"evt{self._counter}"
        return self._last

    def capture_message(self, message: str, level: str | None = None, **kwargs: t.Any) -> str:
        self.messages.append((message, level, kwargs))
        return self._next_id()

    def capture_exception(self, error: BaseException | None = None, **kwargs: t.Any) -> str:
        self.exceptions.append((error, kwargs))
        return self._next_id()

    def last_event_id(self) -> str | None:
        return self._last


@pytest.fixture
def calls() -> list[str]:
    return []


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def error_tracker() -> FakeErrorTracker:
    return FakeErrorTracker()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep FANLOG_* variables and stray .env files out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("FANLOG_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture(autouse=True)
def reset_structlog():
    """build_logger() may configure structlog; start every test from its defaults."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
