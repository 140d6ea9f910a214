"""Admin-facing reads and writes of site configurations."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from ..entitlements.models import Feature, Plan
from ..entitlements.policy import FeaturePolicy
from ..exceptions import ValidationFailure
from ..feature_gates.normalization import normalize_configuration
from ..storage.protocols import SiteConfigurationRepository
from .models import (
    FallbackSettings,
    ManualReview,
    ProviderKind,
    RatingInput,
    SiteConfiguration,
    StarRating,
    StickyStyle,
    parse_site_id,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminConfigurationSnapshot:
    configuration: SiteConfiguration
    feature_availability: Dict[Feature, bool]
    is_persisted: bool


@dataclass(frozen=True)
class SaveAdminConfigurationCommand:
    """Full configuration payload submitted from the admin screen."""

    site_id: str
    plan: Plan
    preferred_provider: ProviderKind
    manual_rating: Optional[RatingInput] = None
    manual_text: Optional[str] = None
    manual_review_count: int = 0
    fallback_text: Optional[str] = None
    store_owner_email: Optional[str] = None
    background_color_hex: Optional[str] = None
    text_color_hex: Optional[str] = None
    accent_color_hex: Optional[str] = None
    use_manual_rating_fallback: bool = False
    fallback_rating: Optional[RatingInput] = None
    fallback_review_count: Optional[int] = None
    notify_on_failure: bool = False
    enabled: Optional[bool] = None


@dataclass(frozen=True)
class SaveAdminConfigurationResult:
    configuration: SiteConfiguration
    warnings: Tuple[str, ...] = field(default_factory=tuple)
    is_new: bool = False


def _validated_email(raw: Optional[str]) -> Optional[str]:
    candidate = (raw or "").strip()
    if not candidate:
        return None
    try:
        validated = validate_email(candidate, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationFailure(
            code="invalid_email",
            message=str(exc),
            field="storeOwnerEmail",
        ) from exc
    return validated.normalized


def _validated_count(value: Optional[int], field_name: str) -> Optional[int]:
    if value is not None and value < 0:
        raise ValidationFailure(
            code="invalid_review_count",
            message="Review count cannot be negative",
            field=field_name,
        )
    return value


def _manual_review(
    rating: Optional[RatingInput],
    text: Optional[str],
    review_count: int,
) -> Optional[ManualReview]:
    count = _validated_count(review_count, "manualReviewCount") or 0
    if rating is None:
        return None
    cleaned_text = (text or "").strip() or None
    return ManualReview(rating=StarRating.of(rating), text=cleaned_text, review_count=count)


class SiteConfigurationService:
    """Applies configuration changes and keeps them within the site's plan."""

    def __init__(
        self,
        repository: SiteConfigurationRepository,
        policy: Optional[FeaturePolicy] = None,
    ) -> None:
        self._repository = repository
        self._policy = policy or FeaturePolicy()

    def get_configuration(self, site_id: str) -> Optional[SiteConfiguration]:
        return self._repository.get(parse_site_id(site_id))

    def get_admin_configuration(self, site_id: str) -> AdminConfigurationSnapshot:
        """Return the stored configuration, or an unsaved default for new sites."""

        normalized_id = parse_site_id(site_id)
        stored = self._repository.get(normalized_id)
        configuration = stored or SiteConfiguration.default(normalized_id)
        return AdminConfigurationSnapshot(
            configuration=configuration,
            feature_availability=self._policy.availability(configuration.plan),
            is_persisted=stored is not None,
        )

    def save_admin_configuration(
        self, command: SaveAdminConfigurationCommand
    ) -> SaveAdminConfigurationResult:
        # Everything is validated before the store is touched.
        manual_review = _manual_review(
            command.manual_rating, command.manual_text, command.manual_review_count
        )
        style = StickyStyle.of(
            command.background_color_hex,
            command.text_color_hex,
            command.accent_color_hex,
        )
        email = _validated_email(command.store_owner_email)
        fallback = FallbackSettings(
            use_manual_rating_fallback=command.use_manual_rating_fallback,
            manual_rating=StarRating.of(command.fallback_rating)
            if command.fallback_rating is not None
            else None,
            manual_review_count=_validated_count(command.fallback_review_count, "fallbackReviewCount"),
            notify_on_failure=command.notify_on_failure,
        )

        def apply(config: SiteConfiguration) -> SiteConfiguration:
            updated = (
                config.with_plan(command.plan)
                .with_store_owner_email(email)
                .with_manual_review(manual_review)
                .with_preferred_provider(command.preferred_provider)
                .with_fallback_text(command.fallback_text)
                .with_style(style)
                .with_fallback_settings(fallback)
            )
            if command.enabled is not None:
                updated = updated.with_enabled(command.enabled)
            return updated

        return self._apply(command.site_id, apply)

    def change_plan(self, site_id: str, plan: Plan) -> SaveAdminConfigurationResult:
        return self._apply(site_id, lambda config: config.with_plan(plan))

    def change_preferred_provider(
        self, site_id: str, provider: ProviderKind
    ) -> SaveAdminConfigurationResult:
        return self._apply(site_id, lambda config: config.with_preferred_provider(provider))

    def change_manual_review(
        self,
        site_id: str,
        rating: Optional[RatingInput],
        text: Optional[str] = None,
        review_count: int = 0,
    ) -> SaveAdminConfigurationResult:
        """Replace the embedded manual review; a ``None`` rating removes it."""

        manual_review = _manual_review(rating, text, review_count)
        return self._apply(site_id, lambda config: config.with_manual_review(manual_review))

    def change_fallback_text(
        self, site_id: str, fallback_text: Optional[str]
    ) -> SaveAdminConfigurationResult:
        return self._apply(site_id, lambda config: config.with_fallback_text(fallback_text))

    def change_style(
        self,
        site_id: str,
        background_color_hex: Optional[str] = None,
        text_color_hex: Optional[str] = None,
        accent_color_hex: Optional[str] = None,
    ) -> SaveAdminConfigurationResult:
        style = StickyStyle.of(background_color_hex, text_color_hex, accent_color_hex)
        return self._apply(site_id, lambda config: config.with_style(style))

    def change_fallback_settings(
        self, site_id: str, fallback: FallbackSettings
    ) -> SaveAdminConfigurationResult:
        return self._apply(site_id, lambda config: config.with_fallback_settings(fallback))

    def change_store_owner_email(
        self, site_id: str, email: Optional[str]
    ) -> SaveAdminConfigurationResult:
        validated = _validated_email(email)
        return self._apply(site_id, lambda config: config.with_store_owner_email(validated))

    def set_enabled(self, site_id: str, enabled: bool) -> SaveAdminConfigurationResult:
        return self._apply(site_id, lambda config: config.with_enabled(enabled))

    def _apply(
        self,
        site_id: str,
        mutate: Callable[[SiteConfiguration], SiteConfiguration],
    ) -> SaveAdminConfigurationResult:
        normalized_id = parse_site_id(site_id)
        existing = self._repository.get(normalized_id)
        base = existing or SiteConfiguration.default(normalized_id)

        outcome = normalize_configuration(mutate(base), self._policy)
        stored = self._repository.upsert(outcome.configuration)

        if outcome.warnings:
            logger.info(
                "Configuration adjusted to plan entitlements",
                extra={
                    "site_id": normalized_id,
                    "plan": stored.plan.value,
                    "warnings": list(outcome.warnings),
                },
            )
        return SaveAdminConfigurationResult(
            configuration=stored,
            warnings=outcome.warnings,
            is_new=existing is None,
        )
