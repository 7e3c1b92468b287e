"""
Slack chat-notification sink.
"""

from __future__ import annotations

from typing import Any, Optional

from ..clients import ChatClient, ErrorTracker
from ..formatters import Formatter, LineFormatter
from ..levels import Severity
from ..logging import get_logger
from ..record import LogRecord
from .base import BaseSink

logger = get_logger("fanlog.sinks.slack")

DEFAULT_EVENT_LINK_TEMPLATE = " <https://sentry.io/issues/?query={event_id}|sentry>"


class SlackSink(BaseSink):
    """Sends each record to Slack through a ``ChatClient``.

    Records more severe than WARNING go to ``alert_channel``. When an error
    tracker is attached and reports a last event id, a link to that event is
    appended so the chat message points at the captured error.
    """

    name = "slack"

    def __init__(
        self,
        client: ChatClient,
        *,
        level: Severity | int | str = Severity.ERROR,
        channel: Optional[str] = None,
        alert_channel: Optional[str] = None,
        event_link_template: str = DEFAULT_EVENT_LINK_TEMPLATE,
        formatter: Optional[Formatter] = None,
        name: Optional[str] = None,
    ):
        super().__init__(level=level, formatter=formatter, name=name)
        self._client = client
        self.channel = channel
        self.alert_channel = alert_channel
        self.event_link_template = event_link_template
        self._error_tracker: Optional[ErrorTracker] = None

    def set_error_tracker(self, tracker: Optional[ErrorTracker]) -> None:
        self._error_tracker = tracker

    def default_formatter(self) -> Formatter:
        # Slack stamps messages itself, so the timestamp is left out.
        return LineFormatter("[%severity%] %message%")

    def emit(self, record: LogRecord) -> None:
        text = self.formatter.format_record(record)

        payload: dict[str, Any] = {"text": text}
        payload.update(record.context)

        if record.severity > Severity.WARNING and self.alert_channel:
            payload["channel"] = self.alert_channel
        elif self.channel:
            payload.setdefault("channel", self.channel)

        link = self._event_link()
        if link:
            payload["text"] = f"{payload['text']}{link}"

        self._client.send(payload)

    def _event_link(self) -> Optional[str]:
        """Link to the tracker's last event; the message is sent without it on any failure."""
        if self._error_tracker is None:
            return None
        try:
            event_id = self._error_tracker.last_event_id()
            if not event_id:
                return None
            return self.event_link_template.format(event_id=event_id)
        except Exception as exc:
            logger.warning(
                "sink_event_link_failed",
                sink=self.name,
                error=f"{type(exc).__name__}: {exc}",
            )
            return None

    def close(self) -> None:
        close = getattr(self._client, "close", None)
        if callable(close):
            close()
