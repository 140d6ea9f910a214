"""Site configuration aggregate and admin-facing services."""

from .models import (
    DEFAULT_STYLE,
    FallbackSettings,
    ManualReview,
    ProviderKind,
    SiteConfiguration,
    StarRating,
    StickyStyle,
    parse_product_id,
    parse_site_id,
)
from .service import (
    AdminConfigurationSnapshot,
    SaveAdminConfigurationCommand,
    SaveAdminConfigurationResult,
    SiteConfigurationService,
)

__all__ = [
    "DEFAULT_STYLE",
    "AdminConfigurationSnapshot",
    "FallbackSettings",
    "ManualReview",
    "ProviderKind",
    "SaveAdminConfigurationCommand",
    "SaveAdminConfigurationResult",
    "SiteConfiguration",
    "SiteConfigurationService",
    "StarRating",
    "StickyStyle",
    "parse_product_id",
    "parse_site_id",
]
