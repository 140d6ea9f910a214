from __future__ import annotations

import pytest

from sticky_reviewer.app.entitlements import (
    FEATURE_MINIMUM_PLAN,
    PLAN_CATALOG,
    Feature,
    FeaturePolicy,
    Plan,
    SiteFeaturePolicy,
    get_plan_definition,
)
from sticky_reviewer.app.storage.memory import InMemorySiteConfigurationRepository


def test_plans_are_totally_ordered() -> None:
    assert Plan.FREE < Plan.PRO < Plan.PREMIUM
    assert Plan.PREMIUM >= Plan.PRO
    assert Plan.PRO <= Plan.PRO
    assert sorted([Plan.PREMIUM, Plan.FREE, Plan.PRO]) == [Plan.FREE, Plan.PRO, Plan.PREMIUM]


@pytest.mark.parametrize(
    "plan, expected",
    [
        (Plan.FREE, set()),
        (Plan.PRO, {Feature.MULTIPLE_REVIEW_PROVIDERS, Feature.MANUAL_FALLBACK_TEXT}),
        (Plan.PREMIUM, set(Feature)),
    ],
)
def test_enabled_features_per_plan(plan: Plan, expected) -> None:
    assert FeaturePolicy().enabled_features(plan) == frozenset(expected)


def test_enabled_features_grow_with_plan() -> None:
    policy = FeaturePolicy()
    free, pro, premium = (policy.enabled_features(plan) for plan in (Plan.FREE, Plan.PRO, Plan.PREMIUM))

    assert free <= pro <= premium


def test_enabled_features_matches_is_enabled_filter() -> None:
    policy = FeaturePolicy()
    for plan in Plan:
        expected = {feature for feature in Feature if policy.is_enabled(plan, feature)}
        assert policy.enabled_features(plan) == expected


def test_feature_without_minimum_is_available_everywhere() -> None:
    policy = FeaturePolicy(minimum_plans={Feature.ADVANCED_STYLING: Plan.PREMIUM})

    assert policy.is_enabled(Plan.FREE, Feature.MULTIPLE_REVIEW_PROVIDERS) is True
    assert policy.minimum_plan(Feature.MULTIPLE_REVIEW_PROVIDERS) is None
    assert policy.is_enabled(Plan.PRO, Feature.ADVANCED_STYLING) is False


def test_feature_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        FEATURE_MINIMUM_PLAN[Feature.ADVANCED_STYLING] = Plan.FREE  # type: ignore[index]


def test_plan_catalog_matches_policy() -> None:
    policy = FeaturePolicy()
    for plan, definition in PLAN_CATALOG.items():
        assert definition.features == policy.enabled_features(plan)
    assert get_plan_definition(Plan.PRO).display_name == "Pro"
    assert get_plan_definition(Plan.PREMIUM).includes(Feature.ADVANCED_STYLING)


def test_availability_lists_every_feature() -> None:
    availability = FeaturePolicy().availability(Plan.PRO)

    assert set(availability) == set(Feature)
    assert availability[Feature.MANUAL_FALLBACK_TEXT] is True
    assert availability[Feature.EMAIL_NOTIFICATION_ON_FAILURE] is False


def test_site_policy_defaults_unconfigured_sites_to_free() -> None:
    repository = InMemorySiteConfigurationRepository()
    site_policy = SiteFeaturePolicy(repository)

    assert site_policy.plan_for("missing") == Plan.FREE
    assert site_policy.enabled_features("missing") == frozenset()


def test_site_policy_uses_stored_plan(make_config) -> None:
    repository = InMemorySiteConfigurationRepository()
    repository.upsert(make_config("shop", plan=Plan.PREMIUM))
    site_policy = SiteFeaturePolicy(repository)

    assert site_policy.is_enabled("shop", Feature.ADVANCED_STYLING) is True
    assert site_policy.is_enabled("other", Feature.ADVANCED_STYLING) is False
