"""Shared error helpers for HTTP APIs."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from fastapi import HTTPException, status

from dataroom_api.domain.errors import (
    AlreadyResolvedError,
    DataRoomError,
    DuplicateRequestError,
    ForbiddenError,
    NotFoundError,
    RoomUnavailableError,
    SelfRequestError,
    ValidationError,
)
from dataroom_api.engine.permissions import PUBLIC_DENIAL
from dataroom_api.models.error import Error

_STATUS_ERROR_CODES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_409_CONFLICT: "conflict",
}

# Missing grants are reported exactly like missing resources.
_NOT_FOUND_MESSAGE = "Data room not found or you do not have access."


def error_payload(
    message: str,
    *,
    error: Optional[str] = None,
    status_code: Optional[int] = None,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    resolved_error = error or _STATUS_ERROR_CODES.get(status_code or 0, "error")
    return Error(
        error=resolved_error,
        message=message,
        details=details,
    ).model_dump(by_alias=True, exclude_none=True)


def http_error(
    status_code: int,
    message: str,
    *,
    error: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> HTTPException:
    payload = error_payload(message, error=error, status_code=status_code, details=details)
    return HTTPException(status_code=status_code, detail=payload)


def bad_request(message: str, *, error: Optional[str] = None, details: Optional[dict[str, Any]] = None) -> HTTPException:
    return http_error(status.HTTP_400_BAD_REQUEST, message, error=error, details=details)


def not_found(message: str, *, error: Optional[str] = None, details: Optional[dict[str, Any]] = None) -> HTTPException:
    return http_error(status.HTTP_404_NOT_FOUND, message, error=error, details=details)


def conflict(message: str, *, error: Optional[str] = None, details: Optional[dict[str, Any]] = None) -> HTTPException:
    return http_error(status.HTTP_409_CONFLICT, message, error=error, details=details)


def denied(*, can_request_access: bool = True) -> HTTPException:
    return not_found(
        _NOT_FOUND_MESSAGE,
        error=PUBLIC_DENIAL,
        details={"canRequestAccess": can_request_access},
    )


def from_domain_error(exc: DataRoomError) -> HTTPException:
    """Translate a domain error into the HTTP response the API exposes."""
    if isinstance(exc, (NotFoundError, ForbiddenError)):
        return denied()
    if isinstance(exc, DuplicateRequestError):
        return conflict("Request already pending.", error=exc.code)
    if isinstance(exc, (SelfRequestError, RoomUnavailableError, AlreadyResolvedError)):
        return conflict(exc.message, error=exc.code, details=exc.details or None)
    if isinstance(exc, ValidationError):
        return bad_request(exc.message, error=exc.code, details=exc.details or None)
    return bad_request(exc.message, error=exc.code)


@contextmanager
def domain_errors() -> Iterator[None]:
    """Re-raise domain errors as their HTTP responses."""
    try:
        yield
    except DataRoomError as exc:
        raise from_domain_error(exc) from exc


__all__ = [
    "bad_request",
    "domain_errors",
    "conflict",
    "denied",
    "error_payload",
    "from_domain_error",
    "http_error",
    "not_found",
]
