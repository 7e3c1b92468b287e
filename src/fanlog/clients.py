"""
Backend client contracts consumed by the sinks.

fanlog does not own the error-tracking SDK: any object exposing the
``ErrorTracker`` methods works, including a ``sentry_sdk`` hub or the
``sentry_sdk`` module itself. For chat, a small Slack incoming-webhook client
is provided.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

import httpx

from .formatters import orjson_dumps


@runtime_checkable
class ChatClient(Protocol):
    def send(self, payload: Mapping[str, Any]) -> None: ...


@runtime_checkable
class ErrorTracker(Protocol):
    def capture_message(self, message: str, level: Optional[str] = None, **kwargs: Any) -> Optional[str]: ...

    def capture_exception(self, error: Optional[BaseException] = None, **kwargs: Any) -> Optional[str]: ...

    def last_event_id(self) -> Optional[str]: ...


class SlackWebhookClient:
    """Posts message payloads to a Slack incoming webhook.

    Delivery errors (transport failures, non-2xx responses) are raised as
    ``httpx.HTTPError``; the calling sink contains them.
    """

    def __init__(
        self,
        webhook_url: str,
        *,
        username: Optional[str] = None,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ):
        self.webhook_url = webhook_url
        self.username = username
        self._client = client or httpx.Client(timeout=timeout)
        self._owns_client = client is None

    def send(self, payload: Mapping[str, Any]) -> None:
        body = dict(payload)
        if self.username:
            body.setdefault("username", self.username)

        response = self._client.post(
            self.webhook_url,
            content=orjson_dumps(body),
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
