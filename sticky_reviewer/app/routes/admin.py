"""Admin endpoints for site configuration and failure monitoring."""
from __future__ import annotations

from fastapi import APIRouter, Query

from ..exceptions import StoreUnavailableError, ValidationFailure
from ..schemas.admin import (
    AdminConfigurationRequest,
    AdminConfigurationResponse,
    DispatchSummaryResponse,
    FailureLogEntry,
    FailureLogListResponse,
)
from ..sites.models import parse_site_id
from ..sites.service import SaveAdminConfigurationResult
from ..services import reviews as review_services

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _saved_response(result: SaveAdminConfigurationResult) -> AdminConfigurationResponse:
    policy = review_services.get_feature_policy()
    configuration = result.configuration
    return AdminConfigurationResponse.from_configuration(
        configuration,
        plan_display_name=policy.display_name(configuration.plan),
        features=policy.availability(configuration.plan),
        is_persisted=True,
        warnings=result.warnings,
    )


@router.get(
    "/sites/{site_id}/config",
    response_model=AdminConfigurationResponse,
    response_model_by_alias=True,
)
def get_site_configuration(site_id: str) -> AdminConfigurationResponse:
    service = review_services.get_site_configuration_service()
    try:
        snapshot = service.get_admin_configuration(site_id)
    except (ValidationFailure, StoreUnavailableError) as exc:
        raise exc.to_http_exception() from exc
    policy = review_services.get_feature_policy()
    return AdminConfigurationResponse.from_configuration(
        snapshot.configuration,
        plan_display_name=policy.display_name(snapshot.configuration.plan),
        features=snapshot.feature_availability,
        is_persisted=snapshot.is_persisted,
    )


@router.put(
    "/sites/{site_id}/config",
    response_model=AdminConfigurationResponse,
    response_model_by_alias=True,
)
def save_site_configuration(
    site_id: str,
    payload: AdminConfigurationRequest,
) -> AdminConfigurationResponse:
    service = review_services.get_site_configuration_service()
    try:
        result = service.save_admin_configuration(payload.to_command(site_id))
    except (ValidationFailure, StoreUnavailableError) as exc:
        raise exc.to_http_exception() from exc
    return _saved_response(result)


@router.post(
    "/sites/{site_id}/enable",
    response_model=AdminConfigurationResponse,
    response_model_by_alias=True,
)
def enable_site(site_id: str) -> AdminConfigurationResponse:
    service = review_services.get_site_configuration_service()
    try:
        result = service.set_enabled(site_id, True)
    except (ValidationFailure, StoreUnavailableError) as exc:
        raise exc.to_http_exception() from exc
    return _saved_response(result)


@router.post(
    "/sites/{site_id}/disable",
    response_model=AdminConfigurationResponse,
    response_model_by_alias=True,
)
def disable_site(site_id: str) -> AdminConfigurationResponse:
    service = review_services.get_site_configuration_service()
    try:
        result = service.set_enabled(site_id, False)
    except (ValidationFailure, StoreUnavailableError) as exc:
        raise exc.to_http_exception() from exc
    return _saved_response(result)


@router.get(
    "/sites/{site_id}/failures",
    response_model=FailureLogListResponse,
    response_model_by_alias=True,
)
def list_site_failures(
    site_id: str,
    limit: int = Query(50, ge=1, le=500),
) -> FailureLogListResponse:
    repository = review_services.get_failure_log_repository()
    try:
        entries = repository.list_for_site(parse_site_id(site_id), limit=limit)
    except (ValidationFailure, StoreUnavailableError) as exc:
        raise exc.to_http_exception() from exc
    return FailureLogListResponse(items=[FailureLogEntry.from_log(entry) for entry in entries])


@router.post("/failures/dispatch", response_model=DispatchSummaryResponse)
def dispatch_failure_notifications(
    limit: int = Query(100, ge=1, le=1000),
) -> DispatchSummaryResponse:
    dispatcher = review_services.get_failure_dispatcher()
    try:
        summary = dispatcher.dispatch_pending(limit=limit)
    except StoreUnavailableError as exc:
        raise exc.to_http_exception() from exc
    return DispatchSummaryResponse.from_summary(summary)
