"""Review providers and the selector that picks one per request."""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol, Sequence, Tuple

from ..sites.models import ProviderKind
from .models import ReviewContext, ReviewResult

logger = logging.getLogger(__name__)

MANUAL_NOT_CONFIGURED = "Manual review is not configured."
JUDGEME_DISABLED = (
    "Judge.me API usage is disabled. Configure a manual review or fallback behavior."
)


class ReviewProvider(Protocol):
    """A source of review data.

    ``get_review`` reports problems through :meth:`ReviewResult.failed` instead of
    raising.
    """

    name: str
    kind: ProviderKind

    def can_handle(self, context: ReviewContext) -> bool:
        ...

    def get_review(self, context: ReviewContext) -> ReviewResult:
        ...


class ManualReviewProvider:
    """Serves the rating and text entered by the store owner."""

    name = "ManualReviewProvider"
    kind = ProviderKind.MANUAL

    def can_handle(self, context: ReviewContext) -> bool:
        return context.desired_provider == ProviderKind.MANUAL

    def get_review(self, context: ReviewContext) -> ReviewResult:
        manual = context.manual_review
        if manual is None:
            return ReviewResult.failed(self.name, MANUAL_NOT_CONFIGURED)
        return ReviewResult.succeeded(
            self.name,
            rating=manual.rating,
            text=manual.text,
            review_count=manual.review_count,
        )


class JudgeMeReviewProvider:
    """Judge.me integration, disabled in this service.

    Every call fails without touching the network so the fallback chain is what
    actually serves JudgeMe sites.
    """

    name = "JudgeMeReviewProvider"
    kind = ProviderKind.JUDGEME

    def can_handle(self, context: ReviewContext) -> bool:
        return context.desired_provider == ProviderKind.JUDGEME

    def get_review(self, context: ReviewContext) -> ReviewResult:
        return ReviewResult.failed(self.name, JUDGEME_DISABLED)


class ProviderSelector:
    """Picks a provider for a context, preferring the desired kind."""

    def __init__(self, providers: Iterable[ReviewProvider]) -> None:
        self._providers: Tuple[ReviewProvider, ...] = tuple(providers)

    @property
    def providers(self) -> Sequence[ReviewProvider]:
        return self._providers

    def select(self, context: ReviewContext) -> Optional[ReviewProvider]:
        candidates = [provider for provider in self._providers if provider.can_handle(context)]
        if not candidates:
            logger.debug(
                "No review provider can handle context",
                extra={"site_id": context.site_id, "desired_provider": context.desired_provider.value},
            )
            return None
        for provider in candidates:
            if provider.kind == context.desired_provider:
                return provider
        return candidates[0]


def default_selector() -> ProviderSelector:
    return ProviderSelector((JudgeMeReviewProvider(), ManualReviewProvider()))


__all__ = [
    "JUDGEME_DISABLED",
    "MANUAL_NOT_CONFIGURED",
    "JudgeMeReviewProvider",
    "ManualReviewProvider",
    "ProviderSelector",
    "ReviewProvider",
    "default_selector",
]
