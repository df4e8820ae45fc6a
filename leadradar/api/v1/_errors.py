"""Map service exceptions onto HTTP responses."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from leadradar.core.exceptions import (
    AIProviderError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    FetchError,
    LeadRadarException,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[LeadRadarException], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (FetchError, status.HTTP_502_BAD_GATEWAY),
    (AIProviderError, status.HTTP_502_BAD_GATEWAY),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
)


def status_for(exc: LeadRadarException) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def raise_http_error(exc: LeadRadarException, operation: str) -> None:
    """Re-raise a domain error as ``HTTPException``; conflicts carry ``existing_id``."""
    code = status_for(exc)
    if code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "api.request.failed",
            extra={"event": "api.request.failed", "operation": operation, "error": str(exc)},
        )
        raise HTTPException(status_code=code, detail=f"Failed to {operation}.") from exc

    detail: str | dict = str(exc)
    existing_id = getattr(exc, "existing_id", None)
    if isinstance(exc, ConflictError) and existing_id:
        detail = {"error": str(exc), "existing_id": existing_id}
    raise HTTPException(status_code=code, detail=detail) from exc
