"""Manual review management endpoints."""
from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Query, status

from ..exceptions import StoreUnavailableError, ValidationFailure
from ..schemas.reviews import (
    ManualReviewDeleteResponse,
    ManualReviewListResponse,
    ManualReviewRequest,
    ManualReviewResponse,
)
from ..services import reviews as review_services

router = APIRouter(prefix="/api/reviews/manual", tags=["manual-reviews"])


@router.post("", response_model=ManualReviewResponse, response_model_by_alias=True)
def save_manual_review(payload: ManualReviewRequest) -> ManualReviewResponse:
    service = review_services.get_manual_review_service()
    try:
        result = service.save(
            payload.site_id,
            payload.product_id,
            payload.rating,
            review_count=payload.review_count,
            display_text=payload.display_text,
        )
    except (ValidationFailure, StoreUnavailableError) as exc:
        raise exc.to_http_exception() from exc
    return ManualReviewResponse.from_review(result.review, is_new=result.is_new)


@router.get("", response_model=Union[ManualReviewListResponse, ManualReviewResponse], response_model_by_alias=True)
def get_manual_reviews(
    site_id: Optional[str] = Query(None, alias="siteId"),
    product_id: Optional[str] = Query(None, alias="productId"),
):
    """Return one review when ``productId`` is given, otherwise all of the site's."""

    service = review_services.get_manual_review_service()
    try:
        if product_id is None:
            reviews = service.list_for_site(site_id)
            return ManualReviewListResponse(
                items=[ManualReviewResponse.from_review(review) for review in reviews]
            )
        review = service.get(site_id, product_id)
    except (ValidationFailure, StoreUnavailableError) as exc:
        raise exc.to_http_exception() from exc
    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Manual review not found")
    return ManualReviewResponse.from_review(review)


@router.delete("", response_model=ManualReviewDeleteResponse)
def delete_manual_review(
    site_id: Optional[str] = Query(None, alias="siteId"),
    product_id: Optional[str] = Query(None, alias="productId"),
) -> ManualReviewDeleteResponse:
    service = review_services.get_manual_review_service()
    try:
        deleted = service.delete(site_id, product_id)
    except (ValidationFailure, StoreUnavailableError) as exc:
        raise exc.to_http_exception() from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Manual review not found")
    return ManualReviewDeleteResponse(deleted=True)
