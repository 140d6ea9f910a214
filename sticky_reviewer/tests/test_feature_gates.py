from __future__ import annotations

from sticky_reviewer.app.entitlements import FeaturePolicy, Plan
from sticky_reviewer.app.feature_gates import (
    FALLBACK_TEXT_CLEARED_WARNING,
    NOTIFICATIONS_DISABLED_WARNING,
    PROVIDER_FORCED_WARNING,
    STYLE_RESET_WARNING,
    normalize_configuration,
)
from sticky_reviewer.app.sites.models import DEFAULT_STYLE, ProviderKind, StickyStyle

CUSTOM_STYLE = StickyStyle.of("#000000", "#FFFFFF", "#FF0000")


def test_free_plan_strips_every_paid_setting(make_config) -> None:
    config = make_config(
        plan=Plan.FREE,
        preferred_provider=ProviderKind.JUDGEME,
        fallback_text="Loved by thousands",
        notify_on_failure=True,
    ).with_style(CUSTOM_STYLE)

    outcome = normalize_configuration(config, FeaturePolicy())

    assert outcome.configuration.preferred_provider == ProviderKind.MANUAL
    assert outcome.configuration.fallback_text is None
    assert outcome.configuration.style == DEFAULT_STYLE
    assert outcome.configuration.fallback.notify_on_failure is False
    assert outcome.warnings == (
        PROVIDER_FORCED_WARNING,
        FALLBACK_TEXT_CLEARED_WARNING,
        STYLE_RESET_WARNING,
        NOTIFICATIONS_DISABLED_WARNING,
    )
    assert outcome.changed is True


def test_pro_plan_keeps_provider_and_fallback_text(make_config) -> None:
    config = make_config(
        plan=Plan.PRO,
        preferred_provider=ProviderKind.JUDGEME,
        fallback_text="Loved by thousands",
    ).with_style(CUSTOM_STYLE)

    outcome = normalize_configuration(config, FeaturePolicy())

    assert outcome.configuration.preferred_provider == ProviderKind.JUDGEME
    assert outcome.configuration.fallback_text == "Loved by thousands"
    assert outcome.configuration.style == DEFAULT_STYLE
    assert outcome.warnings == (STYLE_RESET_WARNING,)


def test_premium_plan_is_left_untouched(make_config) -> None:
    config = make_config(
        plan=Plan.PREMIUM,
        preferred_provider=ProviderKind.JUDGEME,
        fallback_text="Loved",
        notify_on_failure=True,
        store_owner_email="owner@example.com",
    ).with_style(CUSTOM_STYLE)

    outcome = normalize_configuration(config, FeaturePolicy())

    assert outcome.configuration is config
    assert outcome.warnings == ()
    assert outcome.changed is False


def test_no_warning_when_value_already_compliant(make_config) -> None:
    outcome = normalize_configuration(make_config(plan=Plan.FREE), FeaturePolicy())

    assert outcome.warnings == ()


def test_normalization_does_not_mutate_input(make_config) -> None:
    config = make_config(plan=Plan.FREE, preferred_provider=ProviderKind.JUDGEME)

    normalize_configuration(config, FeaturePolicy())

    assert config.preferred_provider == ProviderKind.JUDGEME
