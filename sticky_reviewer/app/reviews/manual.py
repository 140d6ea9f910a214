"""Store operations for per-product manual reviews."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..exceptions import ValidationFailure
from ..sites.models import RatingInput, StarRating, parse_product_id, parse_site_id
from ..storage.protocols import ManualReviewRepository
from .models import ProductReview

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveManualReviewResult:
    review: ProductReview
    is_new: bool


class ManualReviewService:
    """Validates and persists manual reviews keyed by site and product."""

    def __init__(self, repository: ManualReviewRepository) -> None:
        self._repository = repository

    def save(
        self,
        site_id: str,
        product_id: str,
        rating: RatingInput,
        review_count: int = 0,
        display_text: Optional[str] = None,
    ) -> SaveManualReviewResult:
        """Create the review for the pair, or update the existing one in place.

        All arguments are validated before the repository is read.
        """

        normalized_site = parse_site_id(site_id)
        normalized_product = parse_product_id(product_id)
        star_rating = StarRating.of(rating)
        if review_count < 0:
            raise ValidationFailure(
                code="invalid_review_count",
                message="Review count cannot be negative",
                field="reviewCount",
            )
        text = (display_text or "").strip()

        existing = self._repository.get(normalized_site, normalized_product)
        if existing is None:
            review = self._repository.create(
                ProductReview(
                    site_id=normalized_site,
                    product_id=normalized_product,
                    rating=star_rating,
                    review_count=review_count,
                    display_text=text,
                )
            )
            logger.info(
                "Manual review created",
                extra={"site_id": normalized_site, "product_id": normalized_product},
            )
            return SaveManualReviewResult(review=review, is_new=True)

        review = self._repository.update(
            existing.updated(rating=star_rating, review_count=review_count, display_text=text)
        )
        logger.info(
            "Manual review updated",
            extra={"site_id": normalized_site, "product_id": normalized_product},
        )
        return SaveManualReviewResult(review=review, is_new=False)

    def get(self, site_id: str, product_id: str) -> Optional[ProductReview]:
        return self._repository.get(parse_site_id(site_id), parse_product_id(product_id))

    def list_for_site(self, site_id: str) -> List[ProductReview]:
        return list(self._repository.list_for_site(parse_site_id(site_id)))

    def delete(self, site_id: str, product_id: str) -> bool:
        normalized_site = parse_site_id(site_id)
        normalized_product = parse_product_id(product_id)
        deleted = self._repository.delete(normalized_site, normalized_product)
        if deleted:
            logger.info(
                "Manual review deleted",
                extra={"site_id": normalized_site, "product_id": normalized_product},
            )
        return deleted
