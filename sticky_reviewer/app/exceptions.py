"""Exceptions shared across the review resolution services."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from fastapi import HTTPException, status


class StickyReviewerError(Exception):
    """Base class for domain errors raised by the service layer."""


@dataclass
class ValidationFailure(StickyReviewerError):
    """A write was rejected before anything was persisted."""

    code: str
    message: str
    field: Optional[str] = None
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __post_init__(self) -> None:
        base_detail: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.field:
            base_detail["field"] = self.field
        object.__setattr__(self, "_payload", base_detail)
        super().__init__(self.message)

    @property
    def payload(self) -> Mapping[str, Any]:
        """Serialized representation suitable for JSON responses."""

        return self._payload

    def to_http_exception(self) -> HTTPException:
        """Convert the domain error into a FastAPI HTTPException."""

        return HTTPException(status_code=self.status_code, detail=dict(self.payload))


class StoreUnavailableError(StickyReviewerError):
    """Raised when a persistence collaborator cannot be reached."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "store_unavailable", "message": "Storage is temporarily unavailable."},
        )


__all__ = ["StickyReviewerError", "StoreUnavailableError", "ValidationFailure"]
