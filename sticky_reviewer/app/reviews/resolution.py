"""Resolution engine choosing what the sticky bar shows for a request."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..entitlements.models import Feature
from ..entitlements.policy import FeaturePolicy
from ..sites.models import DEFAULT_STYLE, ManualReview, ProviderKind, SiteConfiguration, StickyStyle, parse_site_id
from ..storage.protocols import (
    FailureLogRepository,
    ManualReviewRepository,
    SiteConfigurationRepository,
)
from .models import ProviderFailureLog, ResolvedReview, ReviewContext, ReviewResult
from .providers import ProviderSelector, ReviewProvider, default_selector

if TYPE_CHECKING:  # pragma: no cover
    from ..notifications.notifier import StoreOwnerNotifier

logger = logging.getLogger(__name__)

MANUAL_FALLBACK_NAME = "Manual"
MANUAL_RATING_FALLBACK_NAME = "ManualFallback"
FALLBACK_TEXT_NAME = "FallbackText"
NO_PROVIDER_NAME = "NoProvider"
NO_PROVIDER_REASON = "No review provider is available for this request."
DEFAULT_MANUAL_RATING_TEXT = "Based on customer feedback"


class ReviewResolutionService:
    """Walks provider selection and the fallback chain for a single request.

    Provider problems never escape this class: they are logged, recorded in the
    failure log and answered with a fallback or a suppressed result. Storage
    errors are not caught and reach the caller unchanged.
    """

    def __init__(
        self,
        configurations: SiteConfigurationRepository,
        failure_logs: FailureLogRepository,
        *,
        manual_reviews: Optional[ManualReviewRepository] = None,
        selector: Optional[ProviderSelector] = None,
        policy: Optional[FeaturePolicy] = None,
        notifier: Optional["StoreOwnerNotifier"] = None,
    ) -> None:
        self._configurations = configurations
        self._failure_logs = failure_logs
        self._manual_reviews = manual_reviews
        self._selector = selector or default_selector()
        self._policy = policy or FeaturePolicy()
        self._notifier = notifier

    def resolve(self, site_id: str, product_id: Optional[str] = None) -> ResolvedReview:
        normalized_site = parse_site_id(site_id)
        normalized_product = (product_id or "").strip() or None

        config = self._configurations.get(normalized_site)
        if config is None:
            return ResolvedReview.not_configured()
        if not config.enabled:
            logger.debug("Widget disabled for site", extra={"site_id": normalized_site})
            return ResolvedReview.disabled()

        style = self._style_for(config)
        manual_review = self._manual_review_for(config, normalized_product)
        context = ReviewContext(
            site_id=normalized_site,
            product_id=normalized_product,
            desired_provider=self._desired_provider(config),
            manual_review=manual_review,
            plan=config.plan,
        )

        provider = self._selector.select(context)
        if provider is None:
            result = ReviewResult.failed(NO_PROVIDER_NAME, NO_PROVIDER_REASON)
        else:
            result = self._execute(provider, context)

        if result.success:
            return ResolvedReview.from_result(result, style)

        logger.warning(
            "Review provider failed",
            extra={
                "site_id": normalized_site,
                "product_id": normalized_product,
                "provider": result.provider_name,
                "reason": result.failure_reason,
            },
        )
        entry = self._failure_logs.append(
            ProviderFailureLog(
                site_id=normalized_site,
                product_id=normalized_product,
                provider_name=result.provider_name,
                error_message=result.failure_reason or "",
            )
        )

        fallback = self._fallback(config, manual_review)
        self._notify_owner(config, entry)

        if fallback is not None:
            return ResolvedReview.from_result(fallback, style)
        logger.info(
            "No fallback available; rendering nothing",
            extra={"site_id": normalized_site, "product_id": normalized_product},
        )
        return ResolvedReview.suppressed(result, style)

    def _style_for(self, config: SiteConfiguration) -> StickyStyle:
        if self._policy.is_enabled(config.plan, Feature.ADVANCED_STYLING):
            return config.style
        return DEFAULT_STYLE

    def _desired_provider(self, config: SiteConfiguration) -> ProviderKind:
        desired = config.preferred_provider
        if desired != ProviderKind.MANUAL and not self._policy.is_enabled(
            config.plan, Feature.MULTIPLE_REVIEW_PROVIDERS
        ):
            logger.info(
                "Preferred provider not entitled; using manual for this request",
                extra={"site_id": config.site_id, "preferred_provider": desired.value},
            )
            return ProviderKind.MANUAL
        return desired

    def _manual_review_for(
        self, config: SiteConfiguration, product_id: Optional[str]
    ) -> Optional[ManualReview]:
        if product_id and self._manual_reviews is not None:
            stored = self._manual_reviews.get(config.site_id, product_id)
            if stored is not None:
                return stored.to_manual_review()
        return config.manual_review

    def _execute(self, provider: ReviewProvider, context: ReviewContext) -> ReviewResult:
        try:
            return provider.get_review(context)
        except Exception as exc:
            logger.exception(
                "Review provider raised",
                extra={"site_id": context.site_id, "provider": provider.name},
            )
            return ReviewResult.failed(provider.name, str(exc))

    def _fallback(
        self, config: SiteConfiguration, manual_review: Optional[ManualReview]
    ) -> Optional[ReviewResult]:
        """Return the first available substitute, in priority order."""

        text_entitled = self._policy.is_enabled(config.plan, Feature.MANUAL_FALLBACK_TEXT)

        if manual_review is not None:
            return ReviewResult.succeeded(
                MANUAL_FALLBACK_NAME,
                rating=manual_review.rating,
                text=manual_review.text,
                review_count=manual_review.review_count,
                is_fallback=True,
            )

        fallback = config.fallback
        if fallback.has_manual_rating:
            text = config.fallback_text if text_entitled and config.fallback_text else None
            return ReviewResult.succeeded(
                MANUAL_RATING_FALLBACK_NAME,
                rating=fallback.manual_rating,
                text=text or DEFAULT_MANUAL_RATING_TEXT,
                review_count=fallback.manual_review_count or 0,
                is_fallback=True,
            )

        if config.fallback_text and text_entitled:
            return ReviewResult.succeeded(
                FALLBACK_TEXT_NAME,
                rating=None,
                text=config.fallback_text,
                is_fallback=True,
            )
        return None

    def _notify_owner(self, config: SiteConfiguration, entry: ProviderFailureLog) -> None:
        if self._notifier is None:
            return
        if not (config.fallback.notify_on_failure and config.store_owner_email):
            return
        if not self._policy.is_enabled(config.plan, Feature.EMAIL_NOTIFICATION_ON_FAILURE):
            return

        try:
            delivered = self._notifier.notify_failure(
                config.store_owner_email,
                entry.site_id,
                entry.product_id,
                entry.provider_name,
                entry.error_message,
            )
        except Exception:
            logger.exception(
                "Failure notification raised",
                extra={"site_id": entry.site_id, "failure_id": entry.id},
            )
            return

        if delivered:
            self._failure_logs.mark_notified(entry.id)


__all__ = [
    "DEFAULT_MANUAL_RATING_TEXT",
    "FALLBACK_TEXT_NAME",
    "MANUAL_FALLBACK_NAME",
    "MANUAL_RATING_FALLBACK_NAME",
    "NO_PROVIDER_NAME",
    "ReviewResolutionService",
]
