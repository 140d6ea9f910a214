"""Public endpoints consumed by the embedded sticky bar."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from ..exceptions import StoreUnavailableError, ValidationFailure
from ..schemas.widget import ReviewResponse, WidgetResponse
from ..services import reviews as review_services

router = APIRouter(tags=["widget"])


@router.get("/api/widget/sites/{site_id}", response_model=WidgetResponse, response_model_by_alias=True)
def get_widget(
    site_id: str,
    product_id: Optional[str] = Query(None, alias="productId"),
) -> WidgetResponse:
    service = review_services.get_review_resolution_service()
    try:
        resolved = service.resolve(site_id, product_id)
    except (ValidationFailure, StoreUnavailableError) as exc:
        raise exc.to_http_exception() from exc
    return WidgetResponse.from_resolved(resolved)


@router.get("/api/reviews", response_model=ReviewResponse, response_model_by_alias=True)
def get_review(
    site_id: Optional[str] = Query(None, alias="siteId"),
    product_id: Optional[str] = Query(None, alias="productId"),
) -> ReviewResponse:
    service = review_services.get_review_resolution_service()
    try:
        resolved = service.resolve(site_id, product_id)
    except (ValidationFailure, StoreUnavailableError) as exc:
        raise exc.to_http_exception() from exc
    return ReviewResponse.from_resolved(resolved)
