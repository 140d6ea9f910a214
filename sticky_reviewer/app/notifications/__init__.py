"""Store-owner notifications for provider failures."""

from .dispatcher import DispatchSummary, FailureNotificationDispatcher
from .notifier import EmailStoreOwnerNotifier, StoreOwnerNotifier

__all__ = [
    "DispatchSummary",
    "EmailStoreOwnerNotifier",
    "FailureNotificationDispatcher",
    "StoreOwnerNotifier",
]
