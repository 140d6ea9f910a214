"""Persistence contracts consumed by the review services."""
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..reviews.models import ProductReview, ProviderFailureLog
from ..sites.models import SiteConfiguration


class SiteConfigurationRepository(Protocol):
    """Keyed by site id; last write wins."""

    def get(self, site_id: str) -> Optional[SiteConfiguration]:
        ...

    def upsert(self, configuration: SiteConfiguration) -> SiteConfiguration:
        ...


class ManualReviewRepository(Protocol):
    """Manual reviews keyed by the (site id, product id) pair."""

    def get(self, site_id: str, product_id: str) -> Optional[ProductReview]:
        ...

    def list_for_site(self, site_id: str) -> Sequence[ProductReview]:
        ...

    def create(self, review: ProductReview) -> ProductReview:
        ...

    def update(self, review: ProductReview) -> ProductReview:
        ...

    def delete(self, site_id: str, product_id: str) -> bool:
        ...


class FailureLogRepository(Protocol):
    """Append-only sink for provider failures."""

    def append(self, entry: ProviderFailureLog) -> ProviderFailureLog:
        ...

    def list_for_site(self, site_id: str, *, limit: int = 100) -> Sequence[ProviderFailureLog]:
        ...

    def list_unnotified(self, *, limit: int = 100) -> Sequence[ProviderFailureLog]:
        ...

    def mark_notified(self, entry_id: str) -> Optional[ProviderFailureLog]:
        ...

    def mark_skipped(self, entry_id: str) -> Optional[ProviderFailureLog]:
        ...
