"""API schemas for the public widget endpoints."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..reviews.models import ResolutionStatus, ResolvedReview


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class WidgetResponse(BaseModel):
    should_render: bool = Field(alias="shouldRender")
    is_enabled: bool = Field(alias="isEnabled")
    is_fallback: bool = Field(default=False, alias="isFallback")
    rating: Optional[float] = None
    review_count: int = Field(default=0, alias="reviewCount")
    text: Optional[str] = None
    provider_name: Optional[str] = Field(default=None, alias="providerName")
    background_color_hex: str = Field(alias="backgroundColorHex")
    text_color_hex: str = Field(alias="textColorHex")
    accent_color_hex: str = Field(alias="accentColorHex")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_resolved(cls, resolved: ResolvedReview) -> "WidgetResponse":
        # Suppressed results keep their diagnostics server side.
        rendered = resolved.should_render
        return cls(
            should_render=rendered,
            is_enabled=resolved.is_enabled,
            is_fallback=resolved.is_fallback if rendered else False,
            rating=_as_float(resolved.rating_value) if rendered else None,
            review_count=resolved.review_count if rendered else 0,
            text=resolved.text if rendered else None,
            provider_name=resolved.provider_name if rendered else None,
            background_color_hex=resolved.style.background_color_hex,
            text_color_hex=resolved.style.text_color_hex,
            accent_color_hex=resolved.style.accent_color_hex,
        )


_STATUS_MESSAGES = {
    ResolutionStatus.NOT_CONFIGURED: "Site not configured",
    ResolutionStatus.DISABLED: "Widget is disabled",
    ResolutionStatus.SUPPRESSED: "Review unavailable",
}


class ReviewResponse(BaseModel):
    success: bool
    rating: Optional[float] = None
    review_count: int = Field(default=0, alias="reviewCount")
    text: Optional[str] = None
    provider_name: Optional[str] = Field(default=None, alias="providerName")
    is_fallback: bool = Field(default=False, alias="isFallback")
    error_message: Optional[str] = Field(default=None, alias="errorMessage")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_resolved(cls, resolved: ResolvedReview) -> "ReviewResponse":
        if not resolved.should_render:
            return cls(success=False, error_message=_STATUS_MESSAGES[resolved.status])
        return cls(
            success=True,
            rating=_as_float(resolved.rating_value),
            review_count=resolved.review_count,
            text=resolved.text,
            provider_name=resolved.provider_name,
            is_fallback=resolved.is_fallback,
        )
