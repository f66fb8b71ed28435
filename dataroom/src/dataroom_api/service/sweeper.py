"""Periodic sweep that archives rooms left EXPIRED past the grace window."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dataroom_api.db.session import SessionFactory, run_in_session
from dataroom_api.domain.models import SYSTEM_ACTOR, ActivityAction, as_utc
from dataroom_api.engine.clock import Clock, SystemClock
from dataroom_api.engine.lifecycle import LifecycleEvaluator
from dataroom_api.repo.rooms import DataRoomRepository, room_from_record
from dataroom_api.service.activity import ActivityRecorder, describe_activity

LOGGER = logging.getLogger(__name__)


class ArchiveSweeper:
    def __init__(
        self,
        lifecycle: LifecycleEvaluator,
        *,
        recorder: Optional[ActivityRecorder] = None,
        clock: Optional[Clock] = None,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        self.lifecycle = lifecycle
        self.recorder = recorder or ActivityRecorder(session_factory=session_factory)
        self._clock = clock or SystemClock()
        self._session_factory = session_factory
        self._rooms = DataRoomRepository()

    @property
    def enabled(self) -> bool:
        return self.lifecycle.archive_grace is not None

    def run_once(self, now: Optional[datetime] = None) -> list[str]:
        """Archive every due room; returns the ids archived by this pass."""
        if not self.enabled:
            return []
        instant = as_utc(now) if now is not None else self._clock.now()
        cutoff = instant - self.lifecycle.archive_grace

        def _sweep(session: Session) -> list[tuple[str, str]]:
            archived = []
            for record in self._rooms.list_expired_candidates(cutoff=cutoff, session=session):
                room = room_from_record(record)
                if not self.lifecycle.archive_due(room, instant):
                    continue
                if self._rooms.mark_archived(
                    room.room_id,
                    archived_at=instant,
                    archived_by=SYSTEM_ACTOR,
                    session=session,
                    expires_before=cutoff,
                ):
                    archived.append((room.room_id, room.name))
            return archived

        archived = run_in_session(_sweep, session_factory=self._session_factory)
        for room_id, name in archived:
            LOGGER.info("Archived expired data room %s", room_id)
            self.recorder.record(
                actor_id=SYSTEM_ACTOR,
                action=ActivityAction.ARCHIVE,
                resource_kind="DATA_ROOM",
                resource_id=room_id,
                room_id=room_id,
                description=describe_activity("System", ActivityAction.ARCHIVE, "DATA_ROOM", name),
                details={"reason": "expired"},
            )
        return [room_id for room_id, _ in archived]

    async def run_forever(self, interval_seconds: float, stop_event: Optional[asyncio.Event] = None) -> None:
        stop_event = stop_event or asyncio.Event()
        LOGGER.info("Archive sweeper started (interval=%ss)", interval_seconds)
        while not stop_event.is_set():
            try:
                await asyncio.to_thread(self.run_once)
            except SQLAlchemyError:
                LOGGER.exception("Archive sweep failed")
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
            except asyncio.TimeoutError:
                continue
        LOGGER.info("Archive sweeper stopped")


__all__ = ["ArchiveSweeper"]
