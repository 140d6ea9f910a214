"""API schemas for manual review management."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..reviews.models import ProductReview


class ManualReviewRequest(BaseModel):
    # Ids stay optional here so blank and missing values share one 400 response.
    site_id: Optional[str] = Field(default=None, alias="siteId")
    product_id: Optional[str] = Field(default=None, alias="productId")
    rating: Decimal
    review_count: int = Field(default=0, alias="reviewCount")
    display_text: Optional[str] = Field(default=None, alias="displayText")

    model_config = ConfigDict(populate_by_name=True)


class ManualReviewResponse(BaseModel):
    id: str
    site_id: str = Field(alias="siteId")
    product_id: str = Field(alias="productId")
    rating: float
    review_count: int = Field(alias="reviewCount")
    display_text: str = Field(default="", alias="displayText")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    is_new: Optional[bool] = Field(default=None, alias="isNew")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_review(cls, review: ProductReview, *, is_new: Optional[bool] = None) -> "ManualReviewResponse":
        return cls(
            id=review.id,
            site_id=review.site_id,
            product_id=review.product_id,
            rating=float(review.rating.value),
            review_count=review.review_count,
            display_text=review.display_text,
            created_at=review.created_at,
            updated_at=review.updated_at,
            is_new=is_new,
        )


class ManualReviewListResponse(BaseModel):
    items: List[ManualReviewResponse]


class ManualReviewDeleteResponse(BaseModel):
    deleted: bool
