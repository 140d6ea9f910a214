"""In-memory repositories suitable for tests and local development."""
from __future__ import annotations

from threading import Lock
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..reviews.models import ProductReview, ProviderFailureLog
from ..sites.models import SiteConfiguration


class InMemorySiteConfigurationRepository:
    def __init__(self) -> None:
        self._records: Dict[str, SiteConfiguration] = {}
        self._lock = Lock()

    def get(self, site_id: str) -> Optional[SiteConfiguration]:
        with self._lock:
            return self._records.get(site_id)

    def upsert(self, configuration: SiteConfiguration) -> SiteConfiguration:
        with self._lock:
            self._records[configuration.site_id] = configuration
        return configuration

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class InMemoryManualReviewRepository:
    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], ProductReview] = {}
        self._lock = Lock()

    def get(self, site_id: str, product_id: str) -> Optional[ProductReview]:
        with self._lock:
            return self._records.get((site_id, product_id))

    def list_for_site(self, site_id: str) -> Sequence[ProductReview]:
        with self._lock:
            matching = [review for (site, _), review in self._records.items() if site == site_id]
        return sorted(matching, key=lambda review: review.product_id)

    def create(self, review: ProductReview) -> ProductReview:
        key = (review.site_id, review.product_id)
        with self._lock:
            if key in self._records:
                raise ValueError(f"Manual review already exists for {key}")
            self._records[key] = review
        return review

    def update(self, review: ProductReview) -> ProductReview:
        key = (review.site_id, review.product_id)
        with self._lock:
            if key not in self._records:
                raise LookupError(f"No manual review stored for {key}")
            self._records[key] = review
        return review

    def delete(self, site_id: str, product_id: str) -> bool:
        with self._lock:
            return self._records.pop((site_id, product_id), None) is not None


class InMemoryFailureLogRepository:
    def __init__(self) -> None:
        self._entries: List[ProviderFailureLog] = []
        self._lock = Lock()

    @property
    def entries(self) -> List[ProviderFailureLog]:
        with self._lock:
            return list(self._entries)

    def append(self, entry: ProviderFailureLog) -> ProviderFailureLog:
        with self._lock:
            self._entries.append(entry)
        return entry

    def list_for_site(self, site_id: str, *, limit: int = 100) -> Sequence[ProviderFailureLog]:
        with self._lock:
            matching = [entry for entry in self._entries if entry.site_id == site_id]
        matching.sort(key=lambda entry: entry.occurred_at, reverse=True)
        return matching[:limit]

    def list_unnotified(self, *, limit: int = 100) -> Sequence[ProviderFailureLog]:
        with self._lock:
            pending = [entry for entry in self._entries if entry.pending]
        return pending[:limit]

    def mark_notified(self, entry_id: str) -> Optional[ProviderFailureLog]:
        return self._replace(entry_id, ProviderFailureLog.mark_notified)

    def mark_skipped(self, entry_id: str) -> Optional[ProviderFailureLog]:
        return self._replace(entry_id, ProviderFailureLog.mark_skipped)

    def _replace(
        self, entry_id: str, change: Callable[[ProviderFailureLog], ProviderFailureLog]
    ) -> Optional[ProviderFailureLog]:
        with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.id == entry_id:
                    updated = change(entry)
                    self._entries[index] = updated
                    return updated
        return None
