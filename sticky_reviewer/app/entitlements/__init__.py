"""Plan catalog and feature entitlement policy."""

from .catalog import FEATURE_MINIMUM_PLAN, PLAN_CATALOG, PlanDefinition, get_plan_definition
from .models import Feature, Plan
from .policy import FeaturePolicy, SiteFeaturePolicy

__all__ = [
    "FEATURE_MINIMUM_PLAN",
    "PLAN_CATALOG",
    "Feature",
    "FeaturePolicy",
    "Plan",
    "PlanDefinition",
    "SiteFeaturePolicy",
    "get_plan_definition",
]
