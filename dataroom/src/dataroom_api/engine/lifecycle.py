"""Derive a data room's effective lifecycle status from its stored state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from dataroom_api.domain.models import DataRoom, RoomStatus, as_utc

DEFAULT_EXPIRING_WINDOW_DAYS = 7

_ONE_DAY = timedelta(days=1)
_ONE_MICROSECOND = timedelta(microseconds=1)


@dataclass(frozen=True)
class LifecycleState:
    effective_status: RoomStatus
    days_until_expiration: Optional[int] = None

    @property
    def is_archived(self) -> bool:
        return self.effective_status is RoomStatus.ARCHIVED

    @property
    def is_expired(self) -> bool:
        return self.effective_status is RoomStatus.EXPIRED

    @property
    def needs_banner(self) -> bool:
        return self.effective_status in (RoomStatus.EXPIRING, RoomStatus.EXPIRED)


def days_until(expires_at: datetime, now: datetime) -> int:
    """Whole days until ``expires_at``, rounded up, computed on the instant difference."""

    remaining = as_utc(expires_at) - as_utc(now)
    micros = remaining // _ONE_MICROSECOND
    day_micros = _ONE_DAY // _ONE_MICROSECOND
    return -(-micros // day_micros)


def evaluate_lifecycle(
    room: DataRoom,
    now: datetime,
    *,
    expiring_window_days: int = DEFAULT_EXPIRING_WINDOW_DAYS,
) -> LifecycleState:
    if room.is_archived:
        return LifecycleState(RoomStatus.ARCHIVED)
    if room.expires_at is None:
        return LifecycleState(RoomStatus.ACTIVE)
    days = days_until(room.expires_at, now)
    if days <= 0:
        return LifecycleState(RoomStatus.EXPIRED, days)
    if days <= expiring_window_days:
        return LifecycleState(RoomStatus.EXPIRING, days)
    return LifecycleState(RoomStatus.ACTIVE, days)


class LifecycleEvaluator:
    """Lifecycle policy bound to the configured expiring and grace windows."""

    def __init__(
        self,
        *,
        expiring_window_days: int = DEFAULT_EXPIRING_WINDOW_DAYS,
        archive_grace: Optional[timedelta] = None,
    ) -> None:
        self.expiring_window_days = expiring_window_days
        self.archive_grace = archive_grace

    def evaluate(self, room: DataRoom, now: datetime) -> LifecycleState:
        return evaluate_lifecycle(room, now, expiring_window_days=self.expiring_window_days)

    def archive_due(self, room: DataRoom, now: datetime) -> bool:
        """True once an EXPIRED room has outlasted the grace window."""
        if self.archive_grace is None or room.is_archived or room.expires_at is None:
            return False
        if not self.evaluate(room, now).is_expired:
            return False
        return as_utc(now) >= as_utc(room.expires_at) + self.archive_grace


__all__ = [
    "DEFAULT_EXPIRING_WINDOW_DAYS",
    "LifecycleEvaluator",
    "LifecycleState",
    "days_until",
    "evaluate_lifecycle",
]
