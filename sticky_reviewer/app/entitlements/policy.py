"""Feature policy answering entitlement questions for plans and sites."""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, FrozenSet, Mapping, Optional

from .catalog import FEATURE_MINIMUM_PLAN, get_plan_definition
from .models import Feature, Plan

if TYPE_CHECKING:  # pragma: no cover
    from ..storage.protocols import SiteConfigurationRepository


class FeaturePolicy:
    """Pure lookups against the static feature table."""

    def __init__(self, minimum_plans: Mapping[Feature, Plan] = FEATURE_MINIMUM_PLAN) -> None:
        self._minimum_plans = minimum_plans

    def is_enabled(self, plan: Plan, feature: Feature) -> bool:
        required = self._minimum_plans.get(feature)
        if required is None:
            return True
        return plan >= required

    def enabled_features(self, plan: Plan) -> FrozenSet[Feature]:
        return frozenset(feature for feature in Feature if self.is_enabled(plan, feature))

    def minimum_plan(self, feature: Feature) -> Optional[Plan]:
        return self._minimum_plans.get(feature)

    def availability(self, plan: Plan) -> Dict[Feature, bool]:
        """Return the entitlement of every feature for ``plan``."""

        return {feature: self.is_enabled(plan, feature) for feature in Feature}

    def display_name(self, plan: Plan) -> str:
        return get_plan_definition(plan).display_name


class SiteFeaturePolicy:
    """Resolves entitlements through the site's currently stored plan."""

    def __init__(
        self,
        repository: "SiteConfigurationRepository",
        policy: Optional[FeaturePolicy] = None,
    ) -> None:
        self._repository = repository
        self._policy = policy or FeaturePolicy()

    def plan_for(self, site_id: str) -> Plan:
        config = self._repository.get(site_id)
        if config is None:
            return Plan.FREE
        return config.plan

    def is_enabled(self, site_id: str, feature: Feature) -> bool:
        return self._policy.is_enabled(self.plan_for(site_id), feature)

    def enabled_features(self, site_id: str) -> FrozenSet[Feature]:
        return self._policy.enabled_features(self.plan_for(site_id))
