"""Facade wiring the data room services from settings."""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from dataroom_api.config import DataRoomSettings, get_settings
from dataroom_api.db.session import SessionFactory
from dataroom_api.engine.clock import Clock, SystemClock
from dataroom_api.engine.lifecycle import LifecycleEvaluator
from dataroom_api.engine.permissions import PermissionEvaluator

from .access_requests import AccessRequestWorkflow
from .activity import ActivityRecorder
from .notifier import LoggingNotifier, Notifier
from .permissions import PermissionService
from .rooms import RoomService
from .sweeper import ArchiveSweeper


class DataRoomServices:
    def __init__(
        self,
        settings: Optional[DataRoomSettings] = None,
        *,
        clock: Optional[Clock] = None,
        notifier: Optional[Notifier] = None,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.clock = clock or SystemClock()
        grace = self.settings.archive_grace_days
        self.lifecycle = LifecycleEvaluator(
            expiring_window_days=self.settings.expiring_window_days,
            archive_grace=timedelta(days=grace) if grace is not None else None,
        )
        self.evaluator = PermissionEvaluator(
            self.lifecycle,
            expired_blocks_downloads=self.settings.expired_blocks_downloads,
        )
        self.permissions = PermissionService(
            self.evaluator,
            clock=self.clock,
            session_factory=session_factory,
        )
        self.activity = ActivityRecorder(clock=self.clock, session_factory=session_factory)
        self.access_requests = AccessRequestWorkflow(
            self.permissions,
            recorder=self.activity,
            notifier=notifier or LoggingNotifier(),
            clock=self.clock,
            expired_blocks_access_requests=self.settings.expired_blocks_access_requests,
            session_factory=session_factory,
        )
        self.rooms = RoomService(
            self.permissions,
            recorder=self.activity,
            clock=self.clock,
            session_factory=session_factory,
        )
        self.sweeper = ArchiveSweeper(
            self.lifecycle,
            recorder=self.activity,
            clock=self.clock,
            session_factory=session_factory,
        )


_override: Optional[DataRoomServices] = None


@lru_cache()
def _default_services() -> DataRoomServices:
    return DataRoomServices()


def get_data_room_services() -> DataRoomServices:
    return _override or _default_services()


def set_data_room_services(services: Optional[DataRoomServices]) -> None:
    """Swap the active services (``None`` restores the settings-driven default)."""
    global _override
    _override = services


__all__ = ["DataRoomServices", "get_data_room_services", "set_data_room_services"]
