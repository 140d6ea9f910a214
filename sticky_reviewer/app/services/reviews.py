"""Application wiring for the review services."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache, partial

from ...config import Settings, load_settings
from ...mail.config import EmailConfig, load_email_config
from ...mail.providers import EmailProvider, create_email_provider
from ..entitlements.policy import FeaturePolicy
from ..notifications.dispatcher import FailureNotificationDispatcher
from ..notifications.notifier import EmailStoreOwnerNotifier, StoreOwnerNotifier
from ..reviews.manual import ManualReviewService
from ..reviews.providers import default_selector
from ..reviews.resolution import ReviewResolutionService
from ..sites.service import SiteConfigurationService
from ..storage.memory import (
    InMemoryFailureLogRepository,
    InMemoryManualReviewRepository,
    InMemorySiteConfigurationRepository,
)
from ..storage.postgres import (
    PostgresFailureLogRepository,
    PostgresManualReviewRepository,
    PostgresSiteConfigurationRepository,
    connect,
)
from ..storage.protocols import (
    FailureLogRepository,
    ManualReviewRepository,
    SiteConfigurationRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Repositories:
    configurations: SiteConfigurationRepository
    manual_reviews: ManualReviewRepository
    failure_logs: FailureLogRepository


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def get_repositories() -> Repositories:
    settings = get_settings()
    if settings.uses_postgres:
        factory = partial(connect, settings.database_params())
        logger.info("Using PostgreSQL storage", extra={"db_host": settings.db_host})
        return Repositories(
            configurations=PostgresSiteConfigurationRepository(connection_factory=factory),
            manual_reviews=PostgresManualReviewRepository(connection_factory=factory),
            failure_logs=PostgresFailureLogRepository(connection_factory=factory),
        )
    logger.info("Using in-memory storage")
    return Repositories(
        configurations=InMemorySiteConfigurationRepository(),
        manual_reviews=InMemoryManualReviewRepository(),
        failure_logs=InMemoryFailureLogRepository(),
    )


@lru_cache(maxsize=1)
def get_feature_policy() -> FeaturePolicy:
    return FeaturePolicy()


@lru_cache(maxsize=1)
def get_email_config() -> EmailConfig:
    return load_email_config()


@lru_cache(maxsize=1)
def get_email_provider() -> EmailProvider:
    return create_email_provider(get_email_config())


@lru_cache(maxsize=1)
def get_store_owner_notifier() -> StoreOwnerNotifier:
    """Notifier used while answering widget requests; never retries by default."""

    return EmailStoreOwnerNotifier(get_email_provider(), get_email_config())


@lru_cache(maxsize=1)
def get_dispatch_notifier() -> StoreOwnerNotifier:
    return EmailStoreOwnerNotifier.for_dispatch(get_email_provider(), get_email_config())


@lru_cache(maxsize=1)
def get_review_resolution_service() -> ReviewResolutionService:
    repositories = get_repositories()
    return ReviewResolutionService(
        repositories.configurations,
        repositories.failure_logs,
        manual_reviews=repositories.manual_reviews,
        selector=default_selector(),
        policy=get_feature_policy(),
        notifier=get_store_owner_notifier(),
    )


@lru_cache(maxsize=1)
def get_site_configuration_service() -> SiteConfigurationService:
    return SiteConfigurationService(get_repositories().configurations, get_feature_policy())


@lru_cache(maxsize=1)
def get_manual_review_service() -> ManualReviewService:
    return ManualReviewService(get_repositories().manual_reviews)


@lru_cache(maxsize=1)
def get_failure_dispatcher() -> FailureNotificationDispatcher:
    repositories = get_repositories()
    return FailureNotificationDispatcher(
        repositories.configurations,
        repositories.failure_logs,
        get_dispatch_notifier(),
        get_feature_policy(),
    )


def get_failure_log_repository() -> FailureLogRepository:
    return get_repositories().failure_logs


def reset_services() -> None:
    """Drop every cached collaborator so the next call rebuilds from settings."""

    for getter in (
        get_settings,
        get_repositories,
        get_feature_policy,
        get_email_config,
        get_email_provider,
        get_store_owner_notifier,
        get_dispatch_notifier,
        get_review_resolution_service,
        get_site_configuration_service,
        get_manual_review_service,
        get_failure_dispatcher,
    ):
        getter.cache_clear()


__all__ = [
    "Repositories",
    "get_dispatch_notifier",
    "get_email_config",
    "get_email_provider",
    "get_failure_dispatcher",
    "get_failure_log_repository",
    "get_feature_policy",
    "get_manual_review_service",
    "get_repositories",
    "get_review_resolution_service",
    "get_settings",
    "get_site_configuration_service",
    "get_store_owner_notifier",
    "reset_services",
]
