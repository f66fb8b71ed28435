"""Error taxonomy for data room operations.

Evaluators report denial as a regular result; these exceptions are raised by
the workflow and room services for state-machine and input violations so the
transport layer can render precise messages.
"""

from __future__ import annotations

from typing import Any, Optional


class DataRoomError(Exception):
    """Base class for domain errors carrying a stable ``code``."""

    code = "error"
    default_message = "Data room operation failed."

    def __init__(self, message: Optional[str] = None, *, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details or {}


class NotFoundError(DataRoomError):
    code = "not_found"
    default_message = "Not Found"


class ForbiddenError(DataRoomError):
    code = "forbidden"
    default_message = "Forbidden"


class DuplicateRequestError(DataRoomError):
    code = "duplicate_request"
    default_message = "An access request is already pending."


class SelfRequestError(DataRoomError):
    code = "self_request"
    default_message = "Owners cannot request access to their own data room."


class RoomUnavailableError(DataRoomError):
    code = "room_unavailable"
    default_message = "The data room is not accepting this operation."


class AlreadyResolvedError(DataRoomError):
    code = "already_resolved"
    default_message = "The access request has already been resolved."


class ValidationError(DataRoomError):
    code = "validation"
    default_message = "Invalid input."


__all__ = [
    "AlreadyResolvedError",
    "DataRoomError",
    "DuplicateRequestError",
    "ForbiddenError",
    "NotFoundError",
    "RoomUnavailableError",
    "SelfRequestError",
    "ValidationError",
]
