from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from sticky_reviewer.app.entitlements import Feature, FeaturePolicy, Plan
from sticky_reviewer.app.exceptions import StoreUnavailableError
from sticky_reviewer.app.notifications import FailureNotificationDispatcher
from sticky_reviewer.app.reviews import ManualReviewService, ReviewResolutionService
from sticky_reviewer.app.routes import admin as admin_routes
from sticky_reviewer.app.routes import configuration as configuration_routes
from sticky_reviewer.app.routes import reviews as manual_review_routes
from sticky_reviewer.app.routes import widget as widget_routes
from sticky_reviewer.app.schemas.admin import AdminConfigurationRequest
from sticky_reviewer.app.schemas.reviews import ManualReviewListResponse, ManualReviewRequest
from sticky_reviewer.app.services import reviews as review_services
from sticky_reviewer.app.sites import ProviderKind, SiteConfigurationService
from sticky_reviewer.config import Settings


class UnavailableConfigurations:
    def get(self, site_id):
        raise StoreUnavailableError("site_configuration.get", "connection refused")

    def upsert(self, configuration):
        raise StoreUnavailableError("site_configuration.upsert", "connection refused")


@pytest.fixture
def wired(monkeypatch, configurations, manual_reviews, failure_logs, notifier):
    policy = FeaturePolicy()
    resolution = ReviewResolutionService(
        configurations,
        failure_logs,
        manual_reviews=manual_reviews,
        policy=policy,
        notifier=notifier,
    )
    monkeypatch.setattr(review_services, "get_review_resolution_service", lambda: resolution)
    monkeypatch.setattr(
        review_services,
        "get_site_configuration_service",
        lambda: SiteConfigurationService(configurations, policy),
    )
    monkeypatch.setattr(
        review_services, "get_manual_review_service", lambda: ManualReviewService(manual_reviews)
    )
    monkeypatch.setattr(
        review_services,
        "get_failure_dispatcher",
        lambda: FailureNotificationDispatcher(configurations, failure_logs, notifier, policy),
    )
    monkeypatch.setattr(review_services, "get_failure_log_repository", lambda: failure_logs)
    monkeypatch.setattr(review_services, "get_feature_policy", lambda: policy)
    monkeypatch.setattr(review_services, "get_settings", lambda: Settings())
    return configurations


def test_widget_for_unconfigured_site(wired) -> None:
    response = widget_routes.get_widget("unknown", product_id=None)

    assert response.should_render is False
    assert response.is_enabled is False
    assert response.background_color_hex == "#111827"


def test_widget_renders_fallback(wired, make_config) -> None:
    wired.upsert(
        make_config(
            "shop",
            plan=Plan.PREMIUM,
            preferred_provider=ProviderKind.JUDGEME,
            manual_rating="4.6",
            manual_text="Loved it",
        )
    )

    response = widget_routes.get_widget("shop", product_id="sku-1")
    payload = response.model_dump(by_alias=True)

    assert payload["shouldRender"] is True
    assert payload["isFallback"] is True
    assert payload["rating"] == 4.6
    assert payload["providerName"] == "Manual"
    assert payload["text"] == "Loved it"


def test_widget_hides_failure_details(wired, make_config) -> None:
    wired.upsert(make_config("shop", plan=Plan.PRO, preferred_provider=ProviderKind.JUDGEME))

    payload = widget_routes.get_widget("shop", product_id=None).model_dump(by_alias=True)

    assert payload["shouldRender"] is False
    assert payload["isEnabled"] is True
    assert payload["providerName"] is None
    assert payload["text"] is None
    assert "Judge.me" not in str(payload)


def test_widget_blank_site_is_bad_request(wired) -> None:
    with pytest.raises(HTTPException) as exc:
        widget_routes.get_widget("  ", product_id=None)

    assert exc.value.status_code == 400
    assert exc.value.detail == {"error": "invalid_site_id", "message": "Site ID is required", "field": "siteId"}


def test_widget_store_outage_is_service_unavailable(monkeypatch, failure_logs) -> None:
    resolution = ReviewResolutionService(UnavailableConfigurations(), failure_logs)
    monkeypatch.setattr(review_services, "get_review_resolution_service", lambda: resolution)

    with pytest.raises(HTTPException) as exc:
        widget_routes.get_widget("shop", product_id=None)

    assert exc.value.status_code == 503
    assert "connection refused" not in str(exc.value.detail)


@pytest.mark.parametrize(
    "enabled, plan, message",
    [
        (None, None, "Site not configured"),
        (False, Plan.FREE, "Widget is disabled"),
        (True, Plan.FREE, "Review unavailable"),
    ],
)
def test_review_endpoint_uses_generic_messages(wired, make_config, enabled, plan, message) -> None:
    if plan is not None:
        wired.upsert(make_config("shop", plan=plan, enabled=enabled))

    response = widget_routes.get_review(site_id="shop", product_id="sku-1")

    assert response.success is False
    assert response.error_message == message


def test_review_endpoint_success(wired, make_config) -> None:
    wired.upsert(make_config("shop", manual_rating="4.25", manual_text="Great"))

    response = widget_routes.get_review(site_id="shop", product_id=None)

    assert response.success is True
    assert response.rating == 4.25
    assert response.provider_name == "ManualReviewProvider"
    assert response.error_message is None


def test_manual_review_crud(wired) -> None:
    created = manual_review_routes.save_manual_review(
        ManualReviewRequest(siteId="shop", productId="sku-1", rating=Decimal("4.555"), reviewCount=3)
    )
    assert created.is_new is True
    assert created.rating == 4.56

    single = manual_review_routes.get_manual_reviews(site_id="shop", product_id="sku-1")
    listing = manual_review_routes.get_manual_reviews(site_id="shop", product_id=None)
    assert single.id == created.id
    assert isinstance(listing, ManualReviewListResponse)
    assert [item.product_id for item in listing.items] == ["sku-1"]

    deleted = manual_review_routes.delete_manual_review(site_id="shop", product_id="sku-1")
    assert deleted.deleted is True
    with pytest.raises(HTTPException) as exc:
        manual_review_routes.delete_manual_review(site_id="shop", product_id="sku-1")
    assert exc.value.status_code == 404


def test_manual_review_validation_error(wired) -> None:
    with pytest.raises(HTTPException) as exc:
        manual_review_routes.save_manual_review(
            ManualReviewRequest(siteId="shop", productId="sku-1", rating=Decimal("5"), reviewCount=-2)
        )

    assert exc.value.status_code == 400
    assert exc.value.detail["message"] == "Review count cannot be negative"


def test_admin_get_returns_default_for_new_site(wired) -> None:
    response = admin_routes.get_site_configuration("shop")

    assert response.is_persisted is False
    assert response.plan == Plan.FREE
    assert response.plan_display_name == "Free"
    assert response.features[Feature.MULTIPLE_REVIEW_PROVIDERS] is False


def test_admin_save_returns_warnings(wired) -> None:
    payload = AdminConfigurationRequest(
        plan=Plan.FREE,
        preferredProvider=ProviderKind.JUDGEME,
        backgroundColorHex="#000000",
        manualRating=Decimal("4"),
    )

    response = admin_routes.save_site_configuration("shop", payload)
    body = response.model_dump(by_alias=True, mode="json")

    assert body["preferredProvider"] == "manual"
    assert body["backgroundColorHex"] == "#111827"
    assert body["isPersisted"] is True
    assert len(body["warnings"]) == 2
    assert body["manualRating"] == 4.0


def test_admin_save_rejects_invalid_email(wired) -> None:
    payload = AdminConfigurationRequest(plan=Plan.PREMIUM, storeOwnerEmail="nope")

    with pytest.raises(HTTPException) as exc:
        admin_routes.save_site_configuration("shop", payload)

    assert exc.value.status_code == 400
    assert exc.value.detail["field"] == "storeOwnerEmail"


def test_admin_save_requires_plan(wired, configurations, make_config) -> None:
    configurations.upsert(make_config("shop", plan=Plan.PREMIUM, fallback_text="Loved"))

    with pytest.raises(ValidationError) as exc:
        AdminConfigurationRequest.model_validate({"fallbackText": "Still loved"})

    assert [error["loc"] for error in exc.value.errors()] == [("plan",)]
    assert configurations.get("shop").plan == Plan.PREMIUM


def test_admin_enable_disable(wired) -> None:
    assert admin_routes.disable_site("shop").enabled is False
    assert admin_routes.enable_site("shop").enabled is True


def test_admin_failures_and_dispatch(wired, make_config, notifier) -> None:
    wired.upsert(
        make_config(
            "shop",
            plan=Plan.PREMIUM,
            preferred_provider=ProviderKind.JUDGEME,
            store_owner_email="owner@example.com",
            notify_on_failure=True,
        )
    )
    notifier.result = False
    widget_routes.get_widget("shop", product_id=None)

    failures = admin_routes.list_site_failures("shop", limit=10)
    assert [entry.notified for entry in failures.items] == [False]

    notifier.result = True
    summary = admin_routes.dispatch_failure_notifications(limit=100)
    assert (summary.examined, summary.notified) == (1, 1)
    assert admin_routes.list_site_failures("shop", limit=10).items[0].notified is True


def test_configuration_endpoints(wired) -> None:
    plans = configuration_routes.list_plans()
    providers = configuration_routes.list_providers()
    health = configuration_routes.health()

    assert [plan.key for plan in plans.plans] == [Plan.FREE, Plan.PRO, Plan.PREMIUM]
    assert plans.plans[0].features == []
    assert {provider.kind: provider.minimum_plan for provider in providers.providers} == {
        ProviderKind.JUDGEME: Plan.PRO,
        ProviderKind.MANUAL: None,
    }
    assert health.status == "ok"
    assert health.storage == "memory"
