from __future__ import annotations

from decimal import Decimal

import pytest

from sticky_reviewer.app.exceptions import ValidationFailure
from sticky_reviewer.app.reviews import ManualReviewService


@pytest.fixture
def service(manual_reviews) -> ManualReviewService:
    return ManualReviewService(manual_reviews)


def test_save_creates_review(service, manual_reviews) -> None:
    result = service.save(" shop ", " sku-1 ", "4.555", review_count=10, display_text=" Loved it ")

    assert result.is_new is True
    assert result.review.site_id == "shop"
    assert result.review.product_id == "sku-1"
    assert result.review.rating.value == Decimal("4.56")
    assert result.review.display_text == "Loved it"
    assert manual_reviews.get("shop", "sku-1") == result.review


def test_save_updates_existing_review_in_place(service) -> None:
    created = service.save("shop", "sku-1", 3, review_count=1).review

    result = service.save("shop", "sku-1", 4.5, review_count=2, display_text="Better")

    assert result.is_new is False
    assert result.review.id == created.id
    assert result.review.created_at == created.created_at
    assert result.review.rating.value == Decimal("4.50")
    assert result.review.review_count == 2
    assert len(service.list_for_site("shop")) == 1


@pytest.mark.parametrize(
    "args, message",
    [
        (("", "sku-1", 4, 0), "Site ID is required"),
        (("shop", "  ", 4, 0), "Product ID is required"),
        (("shop", "sku-1", 6, 0), "Rating must be between 0 and 5"),
        (("shop", "sku-1", -1, 0), "Rating must be between 0 and 5"),
        (("shop", "sku-1", 4, -1), "Review count cannot be negative"),
    ],
)
def test_invalid_input_is_rejected_before_write(service, manual_reviews, args, message) -> None:
    with pytest.raises(ValidationFailure) as exc:
        service.save(*args)

    assert exc.value.message == message
    assert manual_reviews.list_for_site("shop") == []


def test_get_list_and_delete(service) -> None:
    service.save("shop", "sku-2", 4)
    service.save("shop", "sku-1", 5)
    service.save("other", "sku-1", 1)

    assert [review.product_id for review in service.list_for_site("shop")] == ["sku-1", "sku-2"]
    assert service.get("shop", "sku-2").rating.value == Decimal("4.00")

    assert service.delete("shop", "sku-2") is True
    assert service.delete("shop", "sku-2") is False
    assert service.get("shop", "sku-2") is None


def test_get_requires_product_id(service) -> None:
    with pytest.raises(ValidationFailure):
        service.get("shop", "")
