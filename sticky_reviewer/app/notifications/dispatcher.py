"""Re-delivery of failure notifications that were not sent inline."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from ..entitlements.models import Feature
from ..entitlements.policy import FeaturePolicy
from ..sites.models import SiteConfiguration
from ..storage.protocols import FailureLogRepository, SiteConfigurationRepository
from .notifier import StoreOwnerNotifier

logger = logging.getLogger(__name__)


@dataclass
class DispatchSummary:
    """Aggregated results for a dispatch run."""

    examined: int = 0
    notified: int = 0
    skipped: int = 0
    failed: int = 0


class FailureNotificationDispatcher:
    """Walks pending failure-log entries and notifies opted-in owners.

    Entries whose site has no entitled, opted-in recipient are marked skipped
    so they leave the pending queue; undelivered ones stay pending for the
    next run.
    """

    def __init__(
        self,
        configurations: SiteConfigurationRepository,
        failure_logs: FailureLogRepository,
        notifier: StoreOwnerNotifier,
        policy: Optional[FeaturePolicy] = None,
    ) -> None:
        self._configurations = configurations
        self._failure_logs = failure_logs
        self._notifier = notifier
        self._policy = policy or FeaturePolicy()

    def _recipient(self, config: Optional[SiteConfiguration]) -> Optional[str]:
        if config is None or not config.store_owner_email:
            return None
        if not config.fallback.notify_on_failure:
            return None
        if not self._policy.is_enabled(config.plan, Feature.EMAIL_NOTIFICATION_ON_FAILURE):
            return None
        return config.store_owner_email

    def dispatch_pending(self, limit: int = 100) -> DispatchSummary:
        summary = DispatchSummary()
        configurations: Dict[str, Optional[SiteConfiguration]] = {}

        for entry in self._failure_logs.list_unnotified(limit=max(1, limit)):
            summary.examined += 1
            if entry.site_id not in configurations:
                configurations[entry.site_id] = self._configurations.get(entry.site_id)
            recipient = self._recipient(configurations[entry.site_id])
            if recipient is None:
                self._failure_logs.mark_skipped(entry.id)
                summary.skipped += 1
                continue

            try:
                delivered = self._notifier.notify_failure(
                    recipient,
                    entry.site_id,
                    entry.product_id,
                    entry.provider_name,
                    entry.error_message,
                )
            except Exception:
                logger.exception(
                    "Failure notification raised during dispatch",
                    extra={"site_id": entry.site_id, "failure_id": entry.id},
                )
                delivered = False

            if not delivered:
                summary.failed += 1
                continue
            self._failure_logs.mark_notified(entry.id)
            summary.notified += 1

        logger.info(
            "Failure notification dispatch finished",
            extra={
                "examined": summary.examined,
                "notified": summary.notified,
                "skipped": summary.skipped,
                "failed": summary.failed,
            },
        )
        return summary
