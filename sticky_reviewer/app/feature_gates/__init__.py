"""Feature gating applied to configuration writes."""
from .normalization import (
    FALLBACK_TEXT_CLEARED_WARNING,
    NOTIFICATIONS_DISABLED_WARNING,
    PROVIDER_FORCED_WARNING,
    STYLE_RESET_WARNING,
    GateOutcome,
    normalize_configuration,
)

__all__ = [
    "FALLBACK_TEXT_CLEARED_WARNING",
    "NOTIFICATIONS_DISABLED_WARNING",
    "PROVIDER_FORCED_WARNING",
    "STYLE_RESET_WARNING",
    "GateOutcome",
    "normalize_configuration",
]
