"""Notification hand-off for access request events.

Delivery (e-mail or otherwise) belongs to an external collaborator; this
module only defines the call contract and a logging default.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

LOGGER = logging.getLogger(__name__)

ACCESS_REQUEST_SUBMITTED = "access_request.submitted"
ACCESS_REQUEST_APPROVED = "access_request.approved"
ACCESS_REQUEST_DENIED = "access_request.denied"


class Notifier(Protocol):
    def notify(self, recipient_id: str, event_kind: str, payload: Mapping[str, Any]) -> None:
        ...


class LoggingNotifier:
    def notify(self, recipient_id: str, event_kind: str, payload: Mapping[str, Any]) -> None:
        LOGGER.info("notify %s -> %s: %s", event_kind, recipient_id, dict(payload))


def safe_notify(
    notifier: Notifier,
    recipient_id: str,
    event_kind: str,
    payload: Mapping[str, Any],
) -> bool:
    """Deliver a notification without letting delivery failures escape."""
    try:
        notifier.notify(recipient_id, event_kind, payload)
    except Exception:  # noqa: BLE001
        LOGGER.exception("Failed to deliver %s notification to %s", event_kind, recipient_id)
        return False
    return True


__all__ = [
    "ACCESS_REQUEST_APPROVED",
    "ACCESS_REQUEST_DENIED",
    "ACCESS_REQUEST_SUBMITTED",
    "LoggingNotifier",
    "Notifier",
    "safe_notify",
]
