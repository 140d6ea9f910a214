"""Value objects and records flowing through review resolution."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..entitlements.models import Plan
from ..sites.models import DEFAULT_STYLE, ManualReview, ProviderKind, StarRating, StickyStyle


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ReviewContext:
    """Input handed to a review provider for a single request."""

    site_id: str
    product_id: Optional[str]
    desired_provider: ProviderKind
    manual_review: Optional[ManualReview] = None
    plan: Plan = Plan.FREE


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of a provider attempt or a fallback substitution."""

    success: bool
    provider_name: str
    rating: Optional[StarRating] = None
    review_count: int = 0
    text: Optional[str] = None
    failure_reason: Optional[str] = None
    is_fallback: bool = False

    @classmethod
    def succeeded(
        cls,
        provider_name: str,
        *,
        rating: Optional[StarRating],
        text: Optional[str],
        review_count: int = 0,
        is_fallback: bool = False,
    ) -> "ReviewResult":
        return cls(
            success=True,
            provider_name=provider_name,
            rating=rating,
            review_count=review_count,
            text=text,
            is_fallback=is_fallback,
        )

    @classmethod
    def failed(cls, provider_name: str, reason: str) -> "ReviewResult":
        return cls(success=False, provider_name=provider_name, failure_reason=reason)


class ProductReview(BaseModel):
    """Manual review stored for a single (site, product) pair."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    site_id: str
    product_id: str
    rating: StarRating
    review_count: int = Field(default=0, ge=0)
    display_text: str = ""
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(frozen=True)

    def updated(self, *, rating: StarRating, review_count: int, display_text: str) -> "ProductReview":
        """Return this review with new values; identity and creation time are kept."""

        return self.model_copy(
            update={
                "rating": rating,
                "review_count": review_count,
                "display_text": display_text,
                "updated_at": _utcnow(),
            }
        )

    def to_manual_review(self) -> ManualReview:
        return ManualReview(
            rating=self.rating,
            text=self.display_text or None,
            review_count=self.review_count,
        )


class ProviderFailureLog(BaseModel):
    """Append-only record of a failed primary provider attempt."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    site_id: str
    product_id: Optional[str] = None
    provider_name: str
    error_message: str = ""
    occurred_at: datetime = Field(default_factory=_utcnow)
    notified: bool = False
    # Set when the dispatcher found no opted-in recipient; no email will be sent.
    skipped: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def pending(self) -> bool:
        return not (self.notified or self.skipped)

    def mark_notified(self) -> "ProviderFailureLog":
        return self.model_copy(update={"notified": True})

    def mark_skipped(self) -> "ProviderFailureLog":
        return self.model_copy(update={"skipped": True})


class ResolutionStatus(str, Enum):
    """How a resolution request ended."""

    RENDERED = "rendered"
    FALLBACK = "fallback"
    SUPPRESSED = "suppressed"
    DISABLED = "disabled"
    NOT_CONFIGURED = "not_configured"


@dataclass(frozen=True)
class ResolvedReview:
    """Render-ready result returned by the resolution engine."""

    status: ResolutionStatus
    provider_name: str = ""
    rating: Optional[StarRating] = None
    review_count: int = 0
    text: Optional[str] = None
    style: StickyStyle = DEFAULT_STYLE
    is_fallback: bool = False
    failure_reason: Optional[str] = None

    @property
    def should_render(self) -> bool:
        return self.status in (ResolutionStatus.RENDERED, ResolutionStatus.FALLBACK)

    @property
    def is_enabled(self) -> bool:
        return self.status not in (ResolutionStatus.DISABLED, ResolutionStatus.NOT_CONFIGURED)

    @property
    def rating_value(self) -> Optional[Decimal]:
        return self.rating.value if self.rating is not None else None

    @classmethod
    def from_result(cls, result: ReviewResult, style: StickyStyle) -> "ResolvedReview":
        status = ResolutionStatus.FALLBACK if result.is_fallback else ResolutionStatus.RENDERED
        return cls(
            status=status,
            provider_name=result.provider_name,
            rating=result.rating,
            review_count=result.review_count,
            text=result.text,
            style=style,
            is_fallback=result.is_fallback,
        )

    @classmethod
    def suppressed(cls, failure: ReviewResult, style: StickyStyle) -> "ResolvedReview":
        return cls(
            status=ResolutionStatus.SUPPRESSED,
            provider_name=failure.provider_name,
            style=style,
            failure_reason=failure.failure_reason,
        )

    @classmethod
    def disabled(cls) -> "ResolvedReview":
        return cls(status=ResolutionStatus.DISABLED)

    @classmethod
    def not_configured(cls) -> "ResolvedReview":
        return cls(status=ResolutionStatus.NOT_CONFIGURED)
