"""Store-backed capability checks.

Loads the room, the target folder's ancestry and the principal's grants, then
defers to :class:`PermissionEvaluator` for the decision.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Optional

from sqlalchemy.orm import Session

from dataroom_api.db.session import SessionFactory, run_in_session
from dataroom_api.domain.errors import DataRoomError, ForbiddenError, NotFoundError
from dataroom_api.domain.models import Capability, DataRoom
from dataroom_api.engine.clock import Clock, SystemClock
from dataroom_api.engine.permissions import AccessDecision, DenialReason, PermissionEvaluator
from dataroom_api.repo.grants import GrantRepository, grant_from_record
from dataroom_api.repo.rooms import DataRoomRepository, FolderRepository, room_from_record

LOGGER = logging.getLogger(__name__)


class PermissionService:
    def __init__(
        self,
        evaluator: Optional[PermissionEvaluator] = None,
        *,
        clock: Optional[Clock] = None,
        rooms: Optional[DataRoomRepository] = None,
        folders: Optional[FolderRepository] = None,
        grants: Optional[GrantRepository] = None,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        self.evaluator = evaluator or PermissionEvaluator()
        self._clock = clock or SystemClock()
        self._rooms = rooms or DataRoomRepository()
        self._folders = folders or FolderRepository()
        self._grants = grants or GrantRepository()
        self._session_factory = session_factory

    def check(
        self,
        principal_id: str,
        capability: Capability,
        room_id: str,
        folder_id: Optional[str] = None,
    ) -> AccessDecision:
        return run_in_session(
            lambda session: self.check_in_session(
                session, principal_id, capability, room_id, folder_id
            ),
            session_factory=self._session_factory,
        )

    def can(
        self,
        principal_id: str,
        capability: Capability,
        room_id: str,
        folder_id: Optional[str] = None,
    ) -> bool:
        return self.check(principal_id, capability, room_id, folder_id).allowed

    def capabilities(
        self,
        principal_id: str,
        room_id: str,
        folder_id: Optional[str] = None,
    ) -> FrozenSet[Capability]:
        def _load(session: Session) -> FrozenSet[Capability]:
            record = self._rooms.get(room_id, session=session)
            if record is None:
                return frozenset()
            room = room_from_record(record)
            ancestry = self._ancestry(session, room, folder_id)
            if folder_id is not None and not ancestry:
                return frozenset()
            return self.evaluator.capabilities(
                principal_id,
                room,
                self._load_grants(session, principal_id, room.room_id),
                ancestry=ancestry,
                now=self._clock.now(),
            )

        return run_in_session(_load, session_factory=self._session_factory)

    def check_in_session(
        self,
        session: Session,
        principal_id: str,
        capability: Capability,
        room_id: str,
        folder_id: Optional[str] = None,
    ) -> AccessDecision:
        """Evaluate within an existing transaction so callers can act on the same snapshot."""
        record = self._rooms.get(room_id, session=session)
        room = room_from_record(record) if record is not None else None
        return self.check_room(session, principal_id, capability, room, folder_id)

    def check_room(
        self,
        session: Session,
        principal_id: str,
        capability: Capability,
        room: Optional[DataRoom],
        folder_id: Optional[str] = None,
    ) -> AccessDecision:
        if room is None:
            return self.evaluator.check(principal_id, capability, None, (), now=self._clock.now())
        decision = self.evaluator.check(
            principal_id,
            capability,
            room,
            self._load_grants(session, principal_id, room.room_id),
            folder_id=folder_id,
            ancestry=self._ancestry(session, room, folder_id),
            now=self._clock.now(),
        )
        if not decision.allowed:
            LOGGER.debug(
                "Denied %s on room %s folder %s for %s (%s)",
                capability.value,
                room.room_id,
                folder_id,
                principal_id,
                decision.reason.value if decision.reason else None,
            )
        return decision

    def _ancestry(self, session: Session, room: DataRoom, folder_id: Optional[str]) -> list[str]:
        if folder_id is None:
            return []
        return self._folders.ancestry(folder_id, room_id=room.room_id, session=session)

    def _load_grants(self, session: Session, principal_id: str, room_id: str):
        records = self._grants.list_for_principal(principal_id, room_id=room_id, session=session)
        return [grant_from_record(record) for record in records]


def denial_error(decision: AccessDecision) -> DataRoomError:
    """Exception for a denied decision; transports render both kinds identically."""
    if decision.reason is DenialReason.FORBIDDEN:
        return ForbiddenError()
    return NotFoundError()


__all__ = ["PermissionService", "denial_error"]
