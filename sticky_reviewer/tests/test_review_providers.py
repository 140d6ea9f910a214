from __future__ import annotations

from sticky_reviewer.app.entitlements import Plan
from sticky_reviewer.app.reviews import (
    JudgeMeReviewProvider,
    ManualReviewProvider,
    ProviderKind,
    ProviderSelector,
    ReviewContext,
    default_selector,
)
from sticky_reviewer.app.reviews.providers import JUDGEME_DISABLED, MANUAL_NOT_CONFIGURED
from sticky_reviewer.app.sites.models import ManualReview, StarRating


def _context(desired: ProviderKind, manual_review=None) -> ReviewContext:
    return ReviewContext(
        site_id="shop",
        product_id="sku-1",
        desired_provider=desired,
        manual_review=manual_review,
        plan=Plan.PREMIUM,
    )


class AlwaysProvider:
    name = "Always"
    kind = ProviderKind.MANUAL

    def can_handle(self, context):
        return True

    def get_review(self, context):  # pragma: no cover - never executed by the selector
        raise AssertionError("selector must not execute providers")


def test_manual_provider_returns_stored_review() -> None:
    review = ManualReview(rating=StarRating.of("4.6"), text="Loved it", review_count=12)
    result = ManualReviewProvider().get_review(_context(ProviderKind.MANUAL, review))

    assert result.success is True
    assert result.provider_name == "ManualReviewProvider"
    assert result.rating == StarRating.of("4.6")
    assert result.text == "Loved it"
    assert result.review_count == 12
    assert result.is_fallback is False


def test_manual_provider_fails_without_review() -> None:
    result = ManualReviewProvider().get_review(_context(ProviderKind.MANUAL))

    assert result.success is False
    assert result.failure_reason == MANUAL_NOT_CONFIGURED


def test_judgeme_provider_always_fails() -> None:
    review = ManualReview(rating=StarRating.of(5))
    result = JudgeMeReviewProvider().get_review(_context(ProviderKind.JUDGEME, review))

    assert result.success is False
    assert result.provider_name == "JudgeMeReviewProvider"
    assert result.failure_reason == JUDGEME_DISABLED


def test_providers_only_handle_their_own_kind() -> None:
    assert ManualReviewProvider().can_handle(_context(ProviderKind.JUDGEME)) is False
    assert JudgeMeReviewProvider().can_handle(_context(ProviderKind.MANUAL)) is False


def test_selector_prefers_desired_provider() -> None:
    selector = default_selector()

    assert isinstance(selector.select(_context(ProviderKind.JUDGEME)), JudgeMeReviewProvider)
    assert isinstance(selector.select(_context(ProviderKind.MANUAL)), ManualReviewProvider)


def test_selector_falls_back_to_first_capable_provider() -> None:
    always = AlwaysProvider()
    selector = ProviderSelector((always, ManualReviewProvider()))

    assert selector.select(_context(ProviderKind.JUDGEME)) is always


def test_selector_returns_none_when_nothing_can_handle() -> None:
    selector = ProviderSelector((ManualReviewProvider(),))

    assert selector.select(_context(ProviderKind.JUDGEME)) is None
    assert ProviderSelector(()).select(_context(ProviderKind.MANUAL)) is None


def test_default_selector_registration_order() -> None:
    names = [provider.name for provider in default_selector().providers]

    assert names == ["JudgeMeReviewProvider", "ManualReviewProvider"]
