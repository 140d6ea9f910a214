"""Site configuration aggregate and its value objects."""
from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..entitlements.models import Plan
from ..exceptions import ValidationFailure

RatingInput = Union[Decimal, float, int, str]

_MIN_RATING = Decimal("0")
_MAX_RATING = Decimal("5")
_RATING_QUANTUM = Decimal("0.01")
_HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def parse_site_id(raw: Optional[str]) -> str:
    """Return the trimmed site id, rejecting blank values."""

    site_id = (raw or "").strip()
    if not site_id:
        raise ValidationFailure(code="invalid_site_id", message="Site ID is required", field="siteId")
    return site_id


def parse_product_id(raw: Optional[str]) -> str:
    product_id = (raw or "").strip()
    if not product_id:
        raise ValidationFailure(code="invalid_product_id", message="Product ID is required", field="productId")
    return product_id


def _to_decimal(value: RatingInput) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        # str() keeps 4.6 as 4.6 instead of its binary float expansion
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Expected a numeric rating, got {value!r}") from exc


class ProviderKind(str, Enum):
    """Review data sources known to the widget."""

    JUDGEME = "judgeme"
    MANUAL = "manual"


class StarRating(BaseModel):
    """Star rating between 0 and 5 kept at two decimal places."""

    value: Decimal

    model_config = ConfigDict(frozen=True)

    @field_validator("value", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Decimal:
        number = _to_decimal(value)
        if number.is_nan() or number < _MIN_RATING or number > _MAX_RATING:
            raise ValueError("Star rating must be between 0.0 and 5.0.")
        return number.quantize(_RATING_QUANTUM, rounding=ROUND_HALF_UP)

    @classmethod
    def of(cls, value: RatingInput) -> "StarRating":
        """Build a rating, surfacing range errors as :class:`ValidationFailure`."""

        try:
            number = _to_decimal(value)
        except ValueError as exc:
            raise ValidationFailure(code="invalid_rating", message=str(exc), field="rating") from exc
        if number.is_nan() or number < _MIN_RATING or number > _MAX_RATING:
            raise ValidationFailure(
                code="invalid_rating",
                message="Rating must be between 0 and 5",
                field="rating",
            )
        return cls(value=number)

    def __str__(self) -> str:
        return format(self.value.normalize(), "f")


class ManualReview(BaseModel):
    """Rating and text entered by the store owner."""

    rating: StarRating
    text: Optional[str] = None
    review_count: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class StickyStyle(BaseModel):
    """Colors applied to the rendered sticky bar."""

    background_color_hex: str
    text_color_hex: str
    accent_color_hex: str

    model_config = ConfigDict(frozen=True)

    @field_validator("background_color_hex", "text_color_hex", "accent_color_hex")
    @classmethod
    def _validate_hex(cls, value: str) -> str:
        candidate = value.strip()
        if not _HEX_COLOR_PATTERN.match(candidate):
            raise ValueError(f"Expected a #RGB or #RRGGBB color, got {value!r}")
        return candidate.upper()

    @classmethod
    def of(
        cls,
        background_color_hex: Optional[str] = None,
        text_color_hex: Optional[str] = None,
        accent_color_hex: Optional[str] = None,
    ) -> "StickyStyle":
        """Build a style from optional inputs, defaulting blank colors."""

        resolved = {
            "background_color_hex": _blank_to_none(background_color_hex)
            or DEFAULT_STYLE.background_color_hex,
            "text_color_hex": _blank_to_none(text_color_hex) or DEFAULT_STYLE.text_color_hex,
            "accent_color_hex": _blank_to_none(accent_color_hex) or DEFAULT_STYLE.accent_color_hex,
        }
        for field_name, color in resolved.items():
            if not _HEX_COLOR_PATTERN.match(color):
                raise ValidationFailure(
                    code="invalid_color",
                    message=f"{color!r} is not a valid hex color",
                    field=field_name,
                )
        return cls(**resolved)

    @property
    def is_default(self) -> bool:
        return self == DEFAULT_STYLE


DEFAULT_STYLE = StickyStyle(
    background_color_hex="#111827",
    text_color_hex="#F9FAFB",
    accent_color_hex="#F59E0B",
)


class FallbackSettings(BaseModel):
    """Explicit fallback values used when no stored review is available."""

    use_manual_rating_fallback: bool = False
    manual_rating: Optional[StarRating] = None
    manual_review_count: Optional[int] = Field(default=None, ge=0)
    notify_on_failure: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def has_manual_rating(self) -> bool:
        return self.use_manual_rating_fallback and self.manual_rating is not None


class SiteConfiguration(BaseModel):
    """Per-site widget settings. Instances are immutable; mutators return copies."""

    site_id: str
    plan: Plan = Plan.FREE
    preferred_provider: ProviderKind = ProviderKind.MANUAL
    manual_review: Optional[ManualReview] = None
    fallback_text: Optional[str] = None
    style: StickyStyle = DEFAULT_STYLE
    store_owner_email: Optional[str] = None
    fallback: FallbackSettings = Field(default_factory=FallbackSettings)
    enabled: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(frozen=True)

    @field_validator("site_id")
    @classmethod
    def _validate_site_id(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("site_id must not be blank")
        return stripped

    @field_validator("fallback_text", "store_owner_email")
    @classmethod
    def _normalize_optional_text(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)

    @classmethod
    def default(cls, site_id: str) -> "SiteConfiguration":
        return cls(site_id=parse_site_id(site_id))

    def _updated(self, **changes: Any) -> "SiteConfiguration":
        changes.setdefault("updated_at", _utcnow())
        return self.model_copy(update=changes)

    def with_plan(self, plan: Plan) -> "SiteConfiguration":
        return self._updated(plan=plan)

    def with_preferred_provider(self, provider: ProviderKind) -> "SiteConfiguration":
        return self._updated(preferred_provider=provider)

    def with_manual_review(self, manual_review: Optional[ManualReview]) -> "SiteConfiguration":
        return self._updated(manual_review=manual_review)

    def with_fallback_text(self, fallback_text: Optional[str]) -> "SiteConfiguration":
        return self._updated(fallback_text=_blank_to_none(fallback_text))

    def with_style(self, style: Optional[StickyStyle]) -> "SiteConfiguration":
        return self._updated(style=style or DEFAULT_STYLE)

    def with_store_owner_email(self, email: Optional[str]) -> "SiteConfiguration":
        return self._updated(store_owner_email=_blank_to_none(email))

    def with_fallback_settings(self, fallback: FallbackSettings) -> "SiteConfiguration":
        return self._updated(fallback=fallback)

    def with_enabled(self, enabled: bool) -> "SiteConfiguration":
        return self._updated(enabled=enabled)
