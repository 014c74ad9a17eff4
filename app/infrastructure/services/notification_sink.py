"""Welcome notifications for newly provisioned accounts.

LogOnlyNotificationSink is used when no webhook is configured.
WebhookNotificationSink POSTs a signed JSON payload (HMAC-SHA256 over the
body, ``X-Webhook-Signature: sha256=<hex>``) to an external mailer.
Provisioning calls the sink only after commit; failures are logged by the
caller and never undo the account.
"""

from __future__ import annotations

import hashlib
import hmac
import json

import httpx

from app.application.dtos.account import AccountResult
from app.application.interfaces.services import INotificationSink
from app.core.config import Settings
from app.shared.context import get_request_id
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class LogOnlyNotificationSink:
    """INotificationSink that logs instead of sending. Never logs the password."""

    async def send_welcome(
        self, account: AccountResult, temporary_password: str | None = None
    ) -> None:
        logger.info(
            "Welcome notify: would send to %s (account=%s, temporary_password=%s)",
            account.email,
            account.id,
            "yes" if temporary_password else "no",
        )

    async def close(self) -> None:
        return None


class WebhookNotificationSink:
    """Delivers welcome notifications to a webhook endpoint with retries."""

    def __init__(
        self,
        url: str,
        secret: str | None = None,
        timeout: float = 10.0,
        max_retries: int = 3,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.secret = secret
        self.max_retries = max(1, max_retries)
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _build_payload(
        self, account: AccountResult, temporary_password: str | None
    ) -> dict:
        return {
            "event": "account.welcome",
            "timestamp": utc_now().isoformat(),
            "request_id": get_request_id(),
            "account": {
                "id": account.id,
                "email": account.email,
                "first_name": account.first_name,
                "last_name": account.last_name,
                "kind": account.kind,
                "parish_id": account.parish_id,
            },
            "temporary_password": temporary_password,
        }

    def sign(self, body: str) -> str:
        """Return the hex HMAC-SHA256 of body ('' without a secret)."""
        if not self.secret:
            return ""
        return hmac.new(self.secret.encode(), body.encode(), hashlib.sha256).hexdigest()

    async def send_welcome(
        self, account: AccountResult, temporary_password: str | None = None
    ) -> None:
        """POST the welcome payload.

        Raises:
            httpx.HTTPError: After the last attempt failed (transport error or non-2xx).
        """
        body = json.dumps(self._build_payload(account, temporary_password), default=str)
        headers = {
            "Content-Type": "application/json",
            "X-Notification-Type": "account.welcome",
        }
        if self.secret:
            headers["X-Webhook-Signature"] = f"sha256={self.sign(body)}"

        last_error: httpx.HTTPError | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                response = await self._client.post(self.url, content=body, headers=headers)
                response.raise_for_status()
                logger.info(
                    "Welcome notification delivered for account %s (attempt %d)",
                    account.id,
                    attempt,
                )
                return
            except httpx.HTTPError as exc:
                last_error = exc
                logger.warning(
                    "Welcome notification attempt %d/%d failed for account %s: %s",
                    attempt,
                    self.max_retries,
                    account.id,
                    exc,
                )
        assert last_error is not None
        raise last_error

    async def close(self) -> None:
        await self._client.aclose()


_sink: INotificationSink | None = None


def build_notification_sink(settings: Settings) -> INotificationSink | None:
    """Return the sink selected by settings (None when notifications are disabled)."""
    if not settings.notifications_enabled:
        return None
    if settings.notification_webhook_url:
        secret = (
            settings.notification_webhook_secret.get_secret_value()
            if settings.notification_webhook_secret
            else None
        )
        return WebhookNotificationSink(
            settings.notification_webhook_url,
            secret=secret,
            timeout=settings.notification_timeout_seconds,
        )
    return LogOnlyNotificationSink()


def init_notification_sink(settings: Settings) -> INotificationSink | None:
    """Create the process-wide sink (lifespan startup)."""
    global _sink
    _sink = build_notification_sink(settings)
    logger.info(
        "Notification sink: %s",
        type(_sink).__name__ if _sink is not None else "disabled",
    )
    return _sink


def get_notification_sink() -> INotificationSink | None:
    return _sink


async def shutdown_notification_sink() -> None:
    """Close the process-wide sink (lifespan shutdown)."""
    global _sink
    if _sink is not None:
        await _sink.close()
    _sink = None
