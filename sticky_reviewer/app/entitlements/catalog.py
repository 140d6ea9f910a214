"""Static catalog mapping plans to the features they unlock."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping

from .models import Feature, Plan


# Features missing from this table are available on every plan.
FEATURE_MINIMUM_PLAN: Mapping[Feature, Plan] = MappingProxyType(
    {
        Feature.MULTIPLE_REVIEW_PROVIDERS: Plan.PRO,
        Feature.MANUAL_FALLBACK_TEXT: Plan.PRO,
        Feature.EMAIL_NOTIFICATION_ON_FAILURE: Plan.PREMIUM,
        Feature.ADVANCED_STYLING: Plan.PREMIUM,
    }
)


@dataclass(frozen=True)
class PlanDefinition:
    """Describes a subscription plan and the features it unlocks."""

    key: Plan
    display_name: str
    features: FrozenSet[Feature]

    def includes(self, feature: Feature) -> bool:
        return feature in self.features


def _unlocked_features(plan: Plan) -> FrozenSet[Feature]:
    return frozenset(
        feature
        for feature in Feature
        if feature not in FEATURE_MINIMUM_PLAN or plan >= FEATURE_MINIMUM_PLAN[feature]
    )


_DISPLAY_NAMES: Dict[Plan, str] = {
    Plan.FREE: "Free",
    Plan.PRO: "Pro",
    Plan.PREMIUM: "Premium",
}

PLAN_CATALOG: Mapping[Plan, PlanDefinition] = MappingProxyType(
    {
        plan: PlanDefinition(
            key=plan,
            display_name=_DISPLAY_NAMES[plan],
            features=_unlocked_features(plan),
        )
        for plan in Plan
    }
)


def get_plan_definition(plan: Plan) -> PlanDefinition:
    """Return a plan definition, raising if unsupported."""

    try:
        return PLAN_CATALOG[plan]
    except KeyError as exc:  # pragma: no cover - guarded by static catalog
        raise KeyError(f"Unknown plan: {plan}") from exc
