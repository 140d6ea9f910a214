"""Write-path normalization that keeps configurations within their plan."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from ..entitlements.models import Feature
from ..entitlements.policy import FeaturePolicy
from ..sites.models import DEFAULT_STYLE, ProviderKind, SiteConfiguration

PROVIDER_FORCED_WARNING = (
    "Multiple providers are not enabled for this site; primary provider was forced to Manual."
)
FALLBACK_TEXT_CLEARED_WARNING = (
    "Manual fallback text is not enabled for this site; fallback text was cleared."
)
STYLE_RESET_WARNING = "Advanced styling is not enabled for this site; styling was reset to default."
NOTIFICATIONS_DISABLED_WARNING = (
    "Failure notifications are not enabled for this site; notifications were turned off."
)


@dataclass(frozen=True)
class GateOutcome:
    """Normalized configuration together with the warnings raised on the way."""

    configuration: SiteConfiguration
    warnings: Tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.warnings)


def normalize_configuration(config: SiteConfiguration, policy: FeaturePolicy) -> GateOutcome:
    """Strip every setting the configuration's plan is not entitled to.

    The pass is pure: the input is left untouched and a warning is emitted only
    for values that actually had to change.
    """

    plan = config.plan
    updates = {}
    warnings: List[str] = []

    if not policy.is_enabled(plan, Feature.MULTIPLE_REVIEW_PROVIDERS):
        if config.preferred_provider != ProviderKind.MANUAL:
            updates["preferred_provider"] = ProviderKind.MANUAL
            warnings.append(PROVIDER_FORCED_WARNING)

    if not policy.is_enabled(plan, Feature.MANUAL_FALLBACK_TEXT):
        if config.fallback_text:
            updates["fallback_text"] = None
            warnings.append(FALLBACK_TEXT_CLEARED_WARNING)

    if not policy.is_enabled(plan, Feature.ADVANCED_STYLING):
        if config.style != DEFAULT_STYLE:
            updates["style"] = DEFAULT_STYLE
            warnings.append(STYLE_RESET_WARNING)

    if not policy.is_enabled(plan, Feature.EMAIL_NOTIFICATION_ON_FAILURE):
        if config.fallback.notify_on_failure:
            updates["fallback"] = config.fallback.model_copy(update={"notify_on_failure": False})
            warnings.append(NOTIFICATIONS_DISABLED_WARNING)

    if not updates:
        return GateOutcome(configuration=config)
    return GateOutcome(configuration=config.model_copy(update=updates), warnings=tuple(warnings))
