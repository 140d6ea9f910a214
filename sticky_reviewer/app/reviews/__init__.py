"""Review resolution: providers, the fallback engine and manual reviews."""

from ..sites.models import ProviderKind
from .models import (
    ProductReview,
    ProviderFailureLog,
    ResolutionStatus,
    ResolvedReview,
    ReviewContext,
    ReviewResult,
)
from .manual import ManualReviewService, SaveManualReviewResult
from .providers import (
    JudgeMeReviewProvider,
    ManualReviewProvider,
    ProviderSelector,
    ReviewProvider,
    default_selector,
)
from .resolution import ReviewResolutionService

__all__ = [
    "JudgeMeReviewProvider",
    "ManualReviewProvider",
    "ManualReviewService",
    "ProductReview",
    "ProviderFailureLog",
    "ProviderKind",
    "ProviderSelector",
    "ResolutionStatus",
    "ResolvedReview",
    "ReviewContext",
    "ReviewProvider",
    "ReviewResolutionService",
    "ReviewResult",
    "SaveManualReviewResult",
    "default_selector",
]
