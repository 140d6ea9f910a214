"""API schemas describing plans and providers."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..entitlements.models import Feature, Plan
from ..sites.models import ProviderKind


class PlanResponse(BaseModel):
    key: Plan
    display_name: str = Field(alias="displayName")
    features: List[Feature]

    model_config = ConfigDict(populate_by_name=True)


class PlanListResponse(BaseModel):
    plans: List[PlanResponse]


class ProviderResponse(BaseModel):
    kind: ProviderKind
    name: str
    minimum_plan: Optional[Plan] = Field(default=None, alias="minimumPlan")

    model_config = ConfigDict(populate_by_name=True)


class ProviderListResponse(BaseModel):
    providers: List[ProviderResponse]


class HealthResponse(BaseModel):
    status: str
    storage: str
