"""Room and folder management plus the visibility-filtered activity feed."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Iterable, Optional

from sqlalchemy.orm import Session

from dataroom_api.db.models import DataRoomRecord, FolderRecord
from dataroom_api.db.session import SessionFactory, run_in_session
from dataroom_api.domain.errors import (
    ForbiddenError,
    NotFoundError,
    RoomUnavailableError,
    ValidationError,
)
from dataroom_api.domain.models import (
    DISPLAY_ACTIONS,
    ActivityAction,
    ActivityFilter,
    ActivityPage,
    Capability,
    DataRoom,
    Folder,
    as_utc,
)
from dataroom_api.engine.clock import Clock, SystemClock
from dataroom_api.engine.lifecycle import LifecycleEvaluator, LifecycleState
from dataroom_api.repo.grants import GrantRepository, grant_from_record
from dataroom_api.repo.principals import PrincipalRepository, principal_from_record
from dataroom_api.repo.rooms import (
    DataRoomRepository,
    FolderRepository,
    folder_from_record,
    room_from_record,
)
from dataroom_api.service.activity import ActivityRecorder, describe_activity
from dataroom_api.service.permissions import PermissionService, denial_error

LOGGER = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255


@dataclass(frozen=True)
class RoomView:
    room: DataRoom
    lifecycle: LifecycleState
    capabilities: FrozenSet[Capability]


def _clean_name(name: Optional[str], *, label: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(f"{label} name must not be empty.")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise ValidationError(f"{label} name must be at most {MAX_NAME_LENGTH} characters.")
    return cleaned


class RoomService:
    def __init__(
        self,
        permissions: PermissionService,
        *,
        recorder: Optional[ActivityRecorder] = None,
        clock: Optional[Clock] = None,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        self.permissions = permissions
        self.recorder = recorder or ActivityRecorder(session_factory=session_factory)
        self._clock = clock or SystemClock()
        self._session_factory = session_factory
        self._rooms = DataRoomRepository()
        self._folders = FolderRepository()
        self._grants = GrantRepository()
        self._principals = PrincipalRepository()

    @property
    def lifecycle(self) -> LifecycleEvaluator:
        return self.permissions.evaluator.lifecycle

    # ------------------------------------------------------------------ rooms

    def create_room(
        self,
        owner_id: str,
        name: str,
        *,
        description: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> RoomView:
        cleaned = _clean_name(name, label="Room")
        now = self._clock.now()
        expires_at = as_utc(expires_at)
        if expires_at is not None and expires_at <= now:
            raise ValidationError("Expiration must be in the future.")

        def _create(session: Session) -> tuple[DataRoom, str]:
            owner = self._principals.get(owner_id, session=session)
            if owner is None:
                raise ValidationError("Unknown owner.")
            record = self._rooms.save(
                DataRoomRecord(
                    name=cleaned,
                    description=(description or "").strip() or None,
                    owner_id=owner_id,
                    expires_at=expires_at,
                    created_at=now,
                    updated_at=now,
                ),
                session=session,
            )
            session.flush()
            return room_from_record(record), principal_from_record(owner).name

        room, owner_name = run_in_session(_create, session_factory=self._session_factory)
        LOGGER.info("Data room %s created by %s", room.room_id, owner_id)
        self.recorder.record(
            actor_id=owner_id,
            action=ActivityAction.CREATE,
            resource_kind="DATA_ROOM",
            resource_id=room.room_id,
            room_id=room.room_id,
            description=describe_activity(owner_name, ActivityAction.CREATE, "DATA_ROOM", room.name),
        )
        return self._view(room, owner_id)

    def get_room(self, principal_id: str, room_id: str) -> RoomView:
        """Load a room the principal may see and log the access."""

        def _get(session: Session) -> tuple[RoomView, str]:
            record = self._rooms.get(room_id, session=session)
            if record is None:
                raise NotFoundError()
            room = room_from_record(record)
            decision = self.permissions.check_room(session, principal_id, Capability.VIEW, room)
            if not decision.allowed:
                # Archived rooms stay readable to their owner through ADMIN.
                admin = self.permissions.check_room(session, principal_id, Capability.ADMIN, room)
                # Folder grantees see room metadata, as list_rooms already shows them the room.
                if not admin.allowed and not self._reachable(session, principal_id, room):
                    raise denial_error(decision)
            caps = self._capabilities(session, principal_id, room)
            return RoomView(room, self.lifecycle.evaluate(room, self._clock.now()), caps), self._name(
                session, principal_id
            )

        view, actor_name = run_in_session(_get, session_factory=self._session_factory)
        self.recorder.record(
            actor_id=principal_id,
            action=ActivityAction.VIEW,
            resource_kind="DATA_ROOM",
            resource_id=room_id,
            room_id=room_id,
            description=describe_activity(actor_name, ActivityAction.VIEW, "DATA_ROOM", view.room.name),
        )
        return view

    def list_rooms(self, principal_id: str) -> list[RoomView]:
        """Rooms the principal owns or holds grants on; rooms with no effective access are omitted."""

        def _list(session: Session) -> list[RoomView]:
            now = self._clock.now()
            views = []
            for record in self._rooms.list_for_principal(principal_id, session=session):
                room = room_from_record(record)
                if not self._reachable(session, principal_id, room):
                    continue
                caps = self._capabilities(session, principal_id, room)
                views.append(RoomView(room, self.lifecycle.evaluate(room, now), caps))
            return views

        return run_in_session(_list, session_factory=self._session_factory)

    def update_expiration(
        self,
        actor_id: str,
        room_id: str,
        expires_at: Optional[datetime],
    ) -> RoomView:
        """Extend a room's expiration. ``None`` removes the expiration entirely."""
        expires_at = as_utc(expires_at)

        def _update(session: Session) -> tuple[DataRoom, Optional[datetime], str]:
            existing = self._rooms.get(room_id, session=session)
            if existing is not None and existing.archived_at is not None and existing.owner_id == actor_id:
                raise RoomUnavailableError("Archived rooms cannot be extended.")
            record, room = self._require(session, actor_id, room_id, Capability.EDIT)
            previous = room.expires_at
            if expires_at is not None:
                if expires_at <= self._clock.now():
                    raise ValidationError("Expiration must be in the future.")
                if previous is not None and expires_at <= previous:
                    raise ValidationError("Expiration can only be extended.")
            record.expires_at = expires_at
            record.updated_at = self._clock.now()
            session.flush()
            return room_from_record(record), previous, self._name(session, actor_id)

        room, previous, actor_name = run_in_session(_update, session_factory=self._session_factory)
        LOGGER.info("Data room %s expiration changed by %s: %s -> %s", room_id, actor_id, previous, expires_at)
        self.recorder.record(
            actor_id=actor_id,
            action=ActivityAction.UPDATE_EXPIRATION,
            resource_kind="DATA_ROOM",
            resource_id=room_id,
            room_id=room_id,
            description=describe_activity(actor_name, ActivityAction.UPDATE_EXPIRATION, "DATA_ROOM"),
            details={
                "previous": previous.isoformat() if previous else None,
                "expiresAt": expires_at.isoformat() if expires_at else None,
            },
        )
        return self._view(room, actor_id)

    def archive(self, actor_id: str, room_id: str) -> RoomView:
        def _archive(session: Session) -> tuple[DataRoom, str]:
            _, room = self._require(session, actor_id, room_id, Capability.ADMIN)
            if room.is_archived:
                raise RoomUnavailableError("The data room is already archived.")
            if not self._rooms.mark_archived(
                room_id, archived_at=self._clock.now(), archived_by=actor_id, session=session
            ):
                raise RoomUnavailableError("The data room is already archived.")
            return self._reload(session, room_id), self._name(session, actor_id)

        room, actor_name = run_in_session(_archive, session_factory=self._session_factory)
        LOGGER.info("Data room %s archived by %s", room_id, actor_id)
        self._record_simple(actor_id, actor_name, ActivityAction.ARCHIVE, room)
        return self._view(room, actor_id)

    def unarchive(self, actor_id: str, room_id: str) -> RoomView:
        def _unarchive(session: Session) -> tuple[DataRoom, str]:
            record = self._rooms.get(room_id, session=session)
            if record is None:
                raise NotFoundError()
            if record.owner_id != actor_id:
                raise ForbiddenError()
            if not self._rooms.clear_archived(room_id, updated_at=self._clock.now(), session=session):
                raise ValidationError("The data room is not archived.")
            return self._reload(session, room_id), self._name(session, actor_id)

        room, actor_name = run_in_session(_unarchive, session_factory=self._session_factory)
        LOGGER.info("Data room %s restored by %s", room_id, actor_id)
        self._record_simple(actor_id, actor_name, ActivityAction.UNARCHIVE, room)
        return self._view(room, actor_id)

    # ---------------------------------------------------------------- folders

    def create_folder(
        self,
        actor_id: str,
        room_id: str,
        name: str,
        parent_id: Optional[str] = None,
    ) -> Folder:
        cleaned = _clean_name(name, label="Folder")

        def _create(session: Session) -> tuple[Folder, str]:
            self._require(session, actor_id, room_id, Capability.EDIT, folder_id=parent_id)
            record = self._folders.save(
                FolderRecord(
                    room_id=room_id,
                    parent_id=parent_id,
                    name=cleaned,
                    created_by=actor_id,
                    created_at=self._clock.now(),
                ),
                session=session,
            )
            session.flush()
            return folder_from_record(record), self._name(session, actor_id)

        folder, actor_name = run_in_session(_create, session_factory=self._session_factory)
        LOGGER.info("Folder %s created in room %s by %s", folder.folder_id, room_id, actor_id)
        self.recorder.record(
            actor_id=actor_id,
            action=ActivityAction.CREATE,
            resource_kind="FOLDER",
            resource_id=folder.folder_id,
            room_id=room_id,
            description=describe_activity(actor_name, ActivityAction.CREATE, "FOLDER", folder.name),
        )
        return folder

    def move_folder(
        self,
        actor_id: str,
        room_id: str,
        folder_id: str,
        new_parent_id: Optional[str],
    ) -> Folder:
        """Re-parent a folder; the move may not place a folder beneath itself."""

        def _move(session: Session) -> tuple[Folder, str]:
            self._require(session, actor_id, room_id, Capability.EDIT, folder_id=folder_id)
            if new_parent_id is not None:
                self._require(session, actor_id, room_id, Capability.EDIT, folder_id=new_parent_id)
                parent_chain = self._folders.ancestry(new_parent_id, room_id=room_id, session=session)
                if folder_id in parent_chain:
                    raise ValidationError("A folder cannot be moved beneath itself.")
            else:
                # The room root is only editable through a room-scoped grant.
                self._require(session, actor_id, room_id, Capability.EDIT)
            record = self._folders.get(folder_id, session=session)
            if record is None:
                raise NotFoundError()
            record.parent_id = new_parent_id
            session.flush()
            return folder_from_record(record), self._name(session, actor_id)

        folder, actor_name = run_in_session(_move, session_factory=self._session_factory)
        LOGGER.info("Folder %s moved under %s by %s", folder_id, new_parent_id, actor_id)
        self.recorder.record(
            actor_id=actor_id,
            action=ActivityAction.MOVE,
            resource_kind="FOLDER",
            resource_id=folder_id,
            room_id=room_id,
            description=describe_activity(actor_name, ActivityAction.MOVE, "FOLDER", folder.name),
            details={"parentId": new_parent_id},
        )
        return folder

    def list_folders(self, principal_id: str, room_id: str) -> list[Folder]:
        """Folders the principal can VIEW: the whole tree or only granted subtrees."""

        def _list(session: Session) -> list[Folder]:
            record = self._rooms.get(room_id, session=session)
            room = room_from_record(record) if record is not None else None
            if room is None:
                raise NotFoundError()
            folders = [folder_from_record(row) for row in self._folders.list_for_room(room_id, session=session)]
            parents = {folder.folder_id: folder.parent_id for folder in folders}
            grants = self._load_grants(session, principal_id, room_id)
            now = self._clock.now()
            state = self.lifecycle.evaluate(room, now)
            visible = []
            for folder in folders:
                caps = self.permissions.evaluator.capabilities(
                    principal_id,
                    room,
                    grants,
                    ancestry=_chain(folder.folder_id, parents),
                    now=now,
                    state=state,
                )
                if Capability.VIEW in caps:
                    visible.append(folder)
            if not visible and not self._reachable(session, principal_id, room):
                raise NotFoundError()
            return visible

        return run_in_session(_list, session_factory=self._session_factory)

    # --------------------------------------------------------------- activity

    def recent_activity(
        self,
        principal_id: str,
        *,
        room_id: Optional[str] = None,
        limit: int = 20,
        cursor: Optional[str] = None,
        actions: Optional[Iterable[str]] = DISPLAY_ACTIONS,
    ) -> ActivityPage:
        """Activity the principal may see: one room it can VIEW, or every room it can VIEW."""

        if room_id is not None:
            decision = self.permissions.check(principal_id, Capability.VIEW, room_id)
            if not decision.allowed:
                raise denial_error(decision)
            room_ids = [room_id]
        else:
            room_ids = [
                view.room.room_id
                for view in self.list_rooms(principal_id)
                if Capability.VIEW in view.capabilities
            ]
        return self.recorder.query(
            ActivityFilter(
                limit=limit,
                room_ids=room_ids,
                actions=frozenset(actions) if actions else None,
                cursor=cursor,
            )
        )

    # ---------------------------------------------------------------- helpers

    def _require(
        self,
        session: Session,
        actor_id: str,
        room_id: str,
        capability: Capability,
        *,
        folder_id: Optional[str] = None,
    ) -> tuple[DataRoomRecord, DataRoom]:
        record = self._rooms.get(room_id, session=session)
        if record is None:
            raise NotFoundError()
        room = room_from_record(record)
        decision = self.permissions.check_room(session, actor_id, capability, room, folder_id)
        if not decision.allowed:
            raise denial_error(decision)
        return record, room

    def _capabilities(self, session: Session, principal_id: str, room: DataRoom) -> FrozenSet[Capability]:
        """Room-wide capabilities; folder-scoped grants do not count here."""
        return self.permissions.evaluator.capabilities(
            principal_id,
            room,
            self._load_grants(session, principal_id, room.room_id),
            now=self._clock.now(),
        )

    def _reachable(self, session: Session, principal_id: str, room: DataRoom) -> bool:
        """True when the principal can see the room itself or some folder subtree in it."""
        if self._capabilities(session, principal_id, room):
            return True
        if self.lifecycle.evaluate(room, self._clock.now()).is_archived:
            return False
        return any(
            grant.folder_id is not None and Capability.VIEW in grant.capabilities
            for grant in self._load_grants(session, principal_id, room.room_id)
        )

    def _load_grants(self, session: Session, principal_id: str, room_id: str):
        records = self._grants.list_for_principal(principal_id, room_id=room_id, session=session)
        return [grant_from_record(record) for record in records]

    def _view(self, room: DataRoom, principal_id: str) -> RoomView:
        def _load(session: Session) -> FrozenSet[Capability]:
            return self._capabilities(session, principal_id, room)

        caps = run_in_session(_load, session_factory=self._session_factory)
        return RoomView(room, self.lifecycle.evaluate(room, self._clock.now()), caps)

    def _reload(self, session: Session, room_id: str) -> DataRoom:
        record = session.get(DataRoomRecord, room_id, populate_existing=True)
        if record is None:
            raise NotFoundError()
        return room_from_record(record)

    def _name(self, session: Session, principal_id: str) -> str:
        record = self._principals.get(principal_id, session=session)
        if record is None:
            return principal_id
        return principal_from_record(record).name

    def _record_simple(self, actor_id: str, actor_name: str, action: ActivityAction, room: DataRoom) -> None:
        self.recorder.record(
            actor_id=actor_id,
            action=action,
            resource_kind="DATA_ROOM",
            resource_id=room.room_id,
            room_id=room.room_id,
            description=describe_activity(actor_name, action, "DATA_ROOM", room.name),
        )


def _chain(folder_id: str, parents: dict[str, Optional[str]]) -> list[str]:
    chain: list[str] = []
    current: Optional[str] = folder_id
    while current is not None and current not in chain:
        chain.append(current)
        current = parents.get(current)
    return chain


__all__ = ["RoomService", "RoomView"]
