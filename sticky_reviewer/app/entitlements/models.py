"""Plan and feature enumerations used for entitlement checks."""
from __future__ import annotations

from enum import Enum


class Plan(str, Enum):
    """Subscription plans, ordered from least to most capable."""

    FREE = "free"
    PRO = "pro"
    PREMIUM = "premium"

    @property
    def rank(self) -> int:
        return _PLAN_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Plan):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Plan):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Plan):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Plan):
            return NotImplemented
        return self.rank >= other.rank


_PLAN_RANK = {Plan.FREE: 0, Plan.PRO: 1, Plan.PREMIUM: 2}


class Feature(str, Enum):
    """Capabilities that can be unlocked by a plan."""

    MULTIPLE_REVIEW_PROVIDERS = "multiple_review_providers"
    MANUAL_FALLBACK_TEXT = "manual_fallback_text"
    EMAIL_NOTIFICATION_ON_FAILURE = "email_notification_on_failure"
    ADVANCED_STYLING = "advanced_styling"
