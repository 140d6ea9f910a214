from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from sticky_reviewer.app.entitlements import FeaturePolicy, Plan
from sticky_reviewer.app.sites.models import (
    FallbackSettings,
    ManualReview,
    ProviderKind,
    SiteConfiguration,
    StarRating,
)
from sticky_reviewer.app.storage.memory import (
    InMemoryFailureLogRepository,
    InMemoryManualReviewRepository,
    InMemorySiteConfigurationRepository,
)


class RecordingNotifier:
    def __init__(self, *, result: bool = True, error: Optional[Exception] = None) -> None:
        self.result = result
        self.error = error
        self.calls: List[Tuple[str, str, Optional[str], str, str]] = []

    def notify_failure(self, recipient_email, site_id, product_id, provider_name, error_message):
        self.calls.append((recipient_email, site_id, product_id, provider_name, error_message))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def configurations() -> InMemorySiteConfigurationRepository:
    return InMemorySiteConfigurationRepository()


@pytest.fixture
def manual_reviews() -> InMemoryManualReviewRepository:
    return InMemoryManualReviewRepository()


@pytest.fixture
def failure_logs() -> InMemoryFailureLogRepository:
    return InMemoryFailureLogRepository()


@pytest.fixture
def policy() -> FeaturePolicy:
    return FeaturePolicy()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


def make_configuration(
    site_id: str = "site-1",
    *,
    plan: Plan = Plan.FREE,
    preferred_provider: ProviderKind = ProviderKind.MANUAL,
    manual_rating: Optional[str] = None,
    manual_text: Optional[str] = None,
    fallback_text: Optional[str] = None,
    store_owner_email: Optional[str] = None,
    notify_on_failure: bool = False,
    enabled: bool = True,
    fallback: Optional[FallbackSettings] = None,
) -> SiteConfiguration:
    manual_review = None
    if manual_rating is not None:
        manual_review = ManualReview(rating=StarRating.of(manual_rating), text=manual_text)
    settings = fallback or FallbackSettings(notify_on_failure=notify_on_failure)
    return SiteConfiguration(
        site_id=site_id,
        plan=plan,
        preferred_provider=preferred_provider,
        manual_review=manual_review,
        fallback_text=fallback_text,
        store_owner_email=store_owner_email,
        fallback=settings,
        enabled=enabled,
    )


@pytest.fixture
def make_config():
    return make_configuration


@pytest.fixture
def notifier_cls():
    return RecordingNotifier
