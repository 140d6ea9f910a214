"""Repository contracts and their in-memory and PostgreSQL implementations."""

from .memory import (
    InMemoryFailureLogRepository,
    InMemoryManualReviewRepository,
    InMemorySiteConfigurationRepository,
)
from .postgres import (
    PostgresFailureLogRepository,
    PostgresManualReviewRepository,
    PostgresSiteConfigurationRepository,
    create_schema,
)
from .protocols import FailureLogRepository, ManualReviewRepository, SiteConfigurationRepository

__all__ = [
    "FailureLogRepository",
    "InMemoryFailureLogRepository",
    "InMemoryManualReviewRepository",
    "InMemorySiteConfigurationRepository",
    "ManualReviewRepository",
    "PostgresFailureLogRepository",
    "PostgresManualReviewRepository",
    "PostgresSiteConfigurationRepository",
    "SiteConfigurationRepository",
    "create_schema",
]
