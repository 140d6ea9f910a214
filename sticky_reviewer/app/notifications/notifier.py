"""Store-owner notification when a review provider fails."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from ...mail.config import EmailConfig
from ...mail.providers import EmailProvider
from ...mail.renderer import render_provider_failure

logger = logging.getLogger(__name__)


class StoreOwnerNotifier(Protocol):
    def notify_failure(
        self,
        recipient_email: str,
        site_id: str,
        product_id: Optional[str],
        provider_name: str,
        error_message: str,
    ) -> bool:
        ...


class EmailStoreOwnerNotifier:
    """Sends the provider failure email, retrying with a linear backoff.

    By default only ``config.inline_attempts`` sends are made, so a widget
    request never waits on retries. The dispatcher builds its notifier with
    :meth:`for_dispatch` to get ``config.dispatch_attempts``.

    Returns ``False`` once every attempt has failed; send errors are logged and
    never raised.
    """

    def __init__(
        self,
        provider: EmailProvider,
        config: EmailConfig,
        *,
        attempts: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._provider = provider
        self._config = config
        self._attempts = max(1, config.inline_attempts if attempts is None else attempts)
        self._sleep = sleep

    @classmethod
    def for_dispatch(
        cls,
        provider: EmailProvider,
        config: EmailConfig,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "EmailStoreOwnerNotifier":
        return cls(provider, config, attempts=config.dispatch_attempts, sleep=sleep)

    @property
    def attempts(self) -> int:
        return self._attempts

    def notify_failure(
        self,
        recipient_email: str,
        site_id: str,
        product_id: Optional[str],
        provider_name: str,
        error_message: str,
    ) -> bool:
        context = {
            "site_id": site_id,
            "product_label": product_id or "all products",
            "provider_name": provider_name,
            "error_message": error_message,
            "occurred_at": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
            "dashboard_url": self._config.dashboard_url,
        }
        subject, text_body, html_body = render_provider_failure(context)
        attempts = self._attempts
        backoff = max(0.0, self._config.backoff_seconds)

        for attempt in range(1, attempts + 1):
            try:
                self._provider.send_email(recipient_email, subject, html_body, text_body)
            except Exception:
                logger.exception(
                    "Failed to send provider failure email",
                    extra={
                        "site_id": site_id,
                        "email_recipient": recipient_email,
                        "email_attempt": attempt,
                        "email_attempts": attempts,
                    },
                )
                if attempt >= attempts:
                    return False
                if backoff > 0:
                    self._sleep(backoff * attempt)
                continue

            logger.info(
                "Provider failure email dispatched",
                extra={
                    "site_id": site_id,
                    "email_recipient": recipient_email,
                    "email_provider": self._provider.name,
                },
            )
            return True
        return False
