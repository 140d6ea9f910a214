"""Read-only endpoints describing plans, providers and service health."""
from __future__ import annotations

from fastapi import APIRouter

from ..entitlements.catalog import PLAN_CATALOG
from ..entitlements.models import Feature
from ..reviews.providers import default_selector
from ..schemas.configuration import (
    HealthResponse,
    PlanListResponse,
    PlanResponse,
    ProviderListResponse,
    ProviderResponse,
)
from ..services import reviews as review_services
from ..sites.models import ProviderKind

router = APIRouter(prefix="/api", tags=["configuration"])


@router.get("/configuration/plans", response_model=PlanListResponse, response_model_by_alias=True)
def list_plans() -> PlanListResponse:
    plans = [
        PlanResponse(
            key=definition.key,
            display_name=definition.display_name,
            features=[feature for feature in Feature if definition.includes(feature)],
        )
        for definition in PLAN_CATALOG.values()
    ]
    return PlanListResponse(plans=plans)


@router.get(
    "/configuration/providers",
    response_model=ProviderListResponse,
    response_model_by_alias=True,
)
def list_providers() -> ProviderListResponse:
    policy = review_services.get_feature_policy()
    providers = []
    for provider in default_selector().providers:
        # Anything but manual needs the multi-provider entitlement.
        minimum = None
        if provider.kind != ProviderKind.MANUAL:
            minimum = policy.minimum_plan(Feature.MULTIPLE_REVIEW_PROVIDERS)
        providers.append(ProviderResponse(kind=provider.kind, name=provider.name, minimum_plan=minimum))
    return ProviderListResponse(providers=providers)


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    settings = review_services.get_settings()
    return HealthResponse(status="ok", storage=settings.storage_backend)
