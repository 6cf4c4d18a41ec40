"""Notification webhook client (fire-and-forget, single attempt)"""

import httpx
from typing import Any, Dict
from ledger_engine.config import settings
from ledger_engine.domain.exceptions import NotificationDispatchError
from ledger_engine.infrastructure.observability.metrics import notification_latency_histogram


class NotificationClient:
    """Client for handing rendered messages to the external notification transport"""

    def __init__(
        self,
        webhook_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url or settings.notification_webhook_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def send(self, payload: Dict[str, Any]) -> None:
        """
        POST one notification payload to the transport.

        There is no retry here: a reminder that fails to send keeps its old
        last_notified_at and is picked up again on the next trigger.

        Raises:
            NotificationDispatchError: On timeout, HTTP errors, or network failure
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with notification_latency_histogram.time():
                    response = await client.post(self.webhook_url, json=payload)
                    response.raise_for_status()

            except httpx.TimeoutException as e:
                raise NotificationDispatchError(f"Notification webhook timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise NotificationDispatchError(f"Notification webhook error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise NotificationDispatchError(f"Notification webhook unreachable: {e}") from e
