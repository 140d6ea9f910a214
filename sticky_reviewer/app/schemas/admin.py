"""API schemas for the admin configuration screen."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..entitlements.models import Feature, Plan
from ..notifications.dispatcher import DispatchSummary
from ..reviews.models import ProviderFailureLog
from ..sites.models import ProviderKind, SiteConfiguration
from ..sites.service import SaveAdminConfigurationCommand


class AdminConfigurationRequest(BaseModel):
    plan: Plan
    preferred_provider: ProviderKind = Field(default=ProviderKind.MANUAL, alias="preferredProvider")
    manual_rating: Optional[Decimal] = Field(default=None, alias="manualRating")
    manual_text: Optional[str] = Field(default=None, alias="manualText")
    manual_review_count: int = Field(default=0, alias="manualReviewCount")
    fallback_text: Optional[str] = Field(default=None, alias="fallbackText")
    store_owner_email: Optional[str] = Field(default=None, alias="storeOwnerEmail")
    background_color_hex: Optional[str] = Field(default=None, alias="backgroundColorHex")
    text_color_hex: Optional[str] = Field(default=None, alias="textColorHex")
    accent_color_hex: Optional[str] = Field(default=None, alias="accentColorHex")
    use_manual_rating_fallback: bool = Field(default=False, alias="useManualRatingFallback")
    fallback_rating: Optional[Decimal] = Field(default=None, alias="fallbackRating")
    fallback_review_count: Optional[int] = Field(default=None, alias="fallbackReviewCount")
    notify_on_failure: bool = Field(default=False, alias="notifyOnFailure")
    enabled: Optional[bool] = None

    model_config = ConfigDict(populate_by_name=True)

    def to_command(self, site_id: str) -> SaveAdminConfigurationCommand:
        return SaveAdminConfigurationCommand(
            site_id=site_id,
            plan=self.plan,
            preferred_provider=self.preferred_provider,
            manual_rating=self.manual_rating,
            manual_text=self.manual_text,
            manual_review_count=self.manual_review_count,
            fallback_text=self.fallback_text,
            store_owner_email=self.store_owner_email,
            background_color_hex=self.background_color_hex,
            text_color_hex=self.text_color_hex,
            accent_color_hex=self.accent_color_hex,
            use_manual_rating_fallback=self.use_manual_rating_fallback,
            fallback_rating=self.fallback_rating,
            fallback_review_count=self.fallback_review_count,
            notify_on_failure=self.notify_on_failure,
            enabled=self.enabled,
        )


class AdminConfigurationResponse(BaseModel):
    site_id: str = Field(alias="siteId")
    plan: Plan
    plan_display_name: str = Field(alias="planDisplayName")
    preferred_provider: ProviderKind = Field(alias="preferredProvider")
    manual_rating: Optional[float] = Field(default=None, alias="manualRating")
    manual_text: Optional[str] = Field(default=None, alias="manualText")
    manual_review_count: int = Field(default=0, alias="manualReviewCount")
    fallback_text: Optional[str] = Field(default=None, alias="fallbackText")
    store_owner_email: Optional[str] = Field(default=None, alias="storeOwnerEmail")
    background_color_hex: str = Field(alias="backgroundColorHex")
    text_color_hex: str = Field(alias="textColorHex")
    accent_color_hex: str = Field(alias="accentColorHex")
    use_manual_rating_fallback: bool = Field(alias="useManualRatingFallback")
    fallback_rating: Optional[float] = Field(default=None, alias="fallbackRating")
    fallback_review_count: Optional[int] = Field(default=None, alias="fallbackReviewCount")
    notify_on_failure: bool = Field(alias="notifyOnFailure")
    enabled: bool
    is_persisted: bool = Field(alias="isPersisted")
    features: Dict[Feature, bool] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_configuration(
        cls,
        configuration: SiteConfiguration,
        *,
        plan_display_name: str,
        features: Dict[Feature, bool],
        is_persisted: bool,
        warnings: Sequence[str] = (),
    ) -> "AdminConfigurationResponse":
        manual = configuration.manual_review
        fallback = configuration.fallback
        style = configuration.style
        return cls(
            site_id=configuration.site_id,
            plan=configuration.plan,
            plan_display_name=plan_display_name,
            preferred_provider=configuration.preferred_provider,
            manual_rating=float(manual.rating.value) if manual else None,
            manual_text=manual.text if manual else None,
            manual_review_count=manual.review_count if manual else 0,
            fallback_text=configuration.fallback_text,
            store_owner_email=configuration.store_owner_email,
            background_color_hex=style.background_color_hex,
            text_color_hex=style.text_color_hex,
            accent_color_hex=style.accent_color_hex,
            use_manual_rating_fallback=fallback.use_manual_rating_fallback,
            fallback_rating=float(fallback.manual_rating.value) if fallback.manual_rating else None,
            fallback_review_count=fallback.manual_review_count,
            notify_on_failure=fallback.notify_on_failure,
            enabled=configuration.enabled,
            is_persisted=is_persisted,
            features=features,
            warnings=list(warnings),
            updated_at=configuration.updated_at if is_persisted else None,
        )


class FailureLogEntry(BaseModel):
    id: str
    site_id: str = Field(alias="siteId")
    product_id: Optional[str] = Field(default=None, alias="productId")
    provider_name: str = Field(alias="providerName")
    error_message: str = Field(alias="errorMessage")
    occurred_at: datetime = Field(alias="occurredAt")
    notified: bool
    skipped: bool = False

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_log(cls, entry: ProviderFailureLog) -> "FailureLogEntry":
        return cls(
            id=entry.id,
            site_id=entry.site_id,
            product_id=entry.product_id,
            provider_name=entry.provider_name,
            error_message=entry.error_message,
            occurred_at=entry.occurred_at,
            notified=entry.notified,
            skipped=entry.skipped,
        )


class FailureLogListResponse(BaseModel):
    items: List[FailureLogEntry]


class DispatchSummaryResponse(BaseModel):
    examined: int
    notified: int
    skipped: int
    failed: int

    @classmethod
    def from_summary(cls, summary: DispatchSummary) -> "DispatchSummaryResponse":
        return cls(
            examined=summary.examined,
            notified=summary.notified,
            skipped=summary.skipped,
            failed=summary.failed,
        )
