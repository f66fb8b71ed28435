"""Access request workflow: submit, approve, deny, withdraw.

Every resolution is a compare-and-set on the PENDING status so that two
concurrent resolutions of the same request cannot both take effect, and the
grant produced by an approval is written in the same transaction as the
status change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dataroom_api.db.models import AccessRequestRecord, DataRoomRecord
from dataroom_api.db.session import SessionFactory, run_in_session
from dataroom_api.domain.errors import (
    AlreadyResolvedError,
    DuplicateRequestError,
    ForbiddenError,
    NotFoundError,
    RoomUnavailableError,
    SelfRequestError,
    ValidationError,
)
from dataroom_api.domain.models import (
    AccessRequest,
    AccessRole,
    ActivityAction,
    Capability,
    DataRoom,
    Grant,
    ROLE_CAPABILITIES,
    RequestStatus,
    parse_capabilities,
)
from dataroom_api.engine.clock import Clock, SystemClock
from dataroom_api.repo.access_requests import AccessRequestRepository, request_from_record
from dataroom_api.repo.grants import GrantRepository, grant_from_record, scope_key_for
from dataroom_api.repo.principals import PrincipalRepository, principal_from_record
from dataroom_api.repo.rooms import DataRoomRepository, FolderRepository, room_from_record
from dataroom_api.service.activity import ActivityRecorder, describe_activity
from dataroom_api.service.notifier import (
    ACCESS_REQUEST_APPROVED,
    ACCESS_REQUEST_DENIED,
    ACCESS_REQUEST_SUBMITTED,
    LoggingNotifier,
    Notifier,
    safe_notify,
)
from dataroom_api.service.permissions import PermissionService, denial_error

LOGGER = logging.getLogger(__name__)

MAX_REASON_LENGTH = 2000

RequestRef = Union[AccessRequest, str]


def resolve_grant_capabilities(
    capabilities: Optional[Iterable[Union[Capability, str]]] = None,
    role: Optional[Union[AccessRole, str]] = None,
) -> frozenset[Capability]:
    """Capabilities an approval grants; VIEW is always included.

    An explicit capability set wins over a role preset. With neither, the
    grant is VIEW only.
    """

    if capabilities:
        supplied = list(capabilities)
        unknown = sorted(str(value) for value in supplied if not parse_capabilities([value]))
        if unknown:
            raise ValidationError(f"Unknown capabilities: {', '.join(unknown)}.")
        resolved = parse_capabilities(supplied)
    elif role is not None:
        try:
            resolved = ROLE_CAPABILITIES[AccessRole(str(getattr(role, "value", role)).upper())]
        except ValueError as exc:
            raise ValidationError(f"Unknown role '{role}'.") from exc
    else:
        resolved = frozenset()
    return frozenset(resolved | {Capability.VIEW})


@dataclass
class _Outcome:
    request: AccessRequest
    room: DataRoom
    actor_name: str
    grant: Optional[Grant] = None
    recipients: list[str] = field(default_factory=list)


class AccessRequestWorkflow:
    def __init__(
        self,
        permissions: PermissionService,
        *,
        recorder: Optional[ActivityRecorder] = None,
        notifier: Optional[Notifier] = None,
        clock: Optional[Clock] = None,
        expired_blocks_access_requests: bool = False,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        self.permissions = permissions
        self.recorder = recorder or ActivityRecorder(session_factory=session_factory)
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.expired_blocks_access_requests = expired_blocks_access_requests
        self._clock = clock or SystemClock()
        self._session_factory = session_factory
        self._requests = AccessRequestRepository()
        self._grants = GrantRepository()
        self._rooms = DataRoomRepository()
        self._folders = FolderRepository()
        self._principals = PrincipalRepository()

    # ------------------------------------------------------------------ submit

    def submit(
        self,
        requester_id: str,
        room_id: str,
        folder_id: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> AccessRequest:
        if reason is not None:
            reason = reason.strip() or None
            if reason and len(reason) > MAX_REASON_LENGTH:
                raise ValidationError(f"Reason must be at most {MAX_REASON_LENGTH} characters.")

        def _submit(session: Session) -> _Outcome:
            room = self._load_room(session, room_id)
            if folder_id is not None and not self._folders.ancestry(
                folder_id, room_id=room.room_id, session=session
            ):
                raise NotFoundError()
            if requester_id == room.owner_id:
                raise SelfRequestError()
            self._ensure_accepting(room)
            if self._requests.find_pending(requester_id, room.room_id, folder_id, session=session):
                raise DuplicateRequestError()
            now = self._clock.now()
            record = self._requests.add(
                AccessRequestRecord(
                    requester_id=requester_id,
                    room_id=room.room_id,
                    folder_id=folder_id,
                    scope_key=scope_key_for(folder_id),
                    reason=reason,
                    status=RequestStatus.PENDING.value,
                    submitted_at=now,
                ),
                session=session,
            )
            return _Outcome(
                request=request_from_record(record),
                room=room,
                actor_name=self._name(session, requester_id),
                recipients=self._room_admins(session, room, exclude=requester_id),
            )

        try:
            outcome = run_in_session(_submit, session_factory=self._session_factory)
        except IntegrityError as exc:
            # Lost the race against a concurrent submission for the same scope.
            raise DuplicateRequestError() from exc

        request = outcome.request
        LOGGER.info(
            "Access request %s submitted by %s for room %s folder %s",
            request.request_id,
            requester_id,
            request.room_id,
            request.folder_id,
        )
        self._record(outcome, ActivityAction.REQUEST_ACCESS)
        for recipient in outcome.recipients:
            safe_notify(
                self.notifier,
                recipient,
                ACCESS_REQUEST_SUBMITTED,
                {
                    "requestId": request.request_id,
                    "roomId": request.room_id,
                    "roomName": outcome.room.name,
                    "folderId": request.folder_id,
                    "requesterId": requester_id,
                    "requesterName": outcome.actor_name,
                    "reason": request.reason,
                },
            )
        return request

    # ----------------------------------------------------------------- resolve

    def approve(
        self,
        admin_id: str,
        request: RequestRef,
        capabilities: Optional[Iterable[Union[Capability, str]]] = None,
        *,
        role: Optional[Union[AccessRole, str]] = None,
        note: Optional[str] = None,
    ) -> Grant:
        granted = resolve_grant_capabilities(capabilities, role)
        request_id = _request_id(request)

        def _approve(session: Session) -> _Outcome:
            record, room = self._load_for_admin(session, admin_id, request_id)
            self._ensure_accepting(room)
            now = self._clock.now()
            won = self._requests.transition(
                request_id,
                to_status=RequestStatus.APPROVED,
                resolved_by=admin_id,
                resolved_at=now,
                note=note,
                granted=granted,
                session=session,
            )
            if not won:
                raise AlreadyResolvedError()
            grant = self._grants.upsert_union(
                principal_id=record.requester_id,
                room_id=record.room_id,
                folder_id=record.folder_id,
                capabilities=granted,
                granted_by=admin_id,
                granted_at=now,
                session=session,
            )
            session.flush()
            return _Outcome(
                request=self._reload(session, request_id),
                room=room,
                actor_name=self._name(session, admin_id),
                grant=grant_from_record(grant),
            )

        outcome = run_in_session(_approve, session_factory=self._session_factory)
        LOGGER.info(
            "Access request %s approved by %s with %s",
            request_id,
            admin_id,
            sorted(cap.value for cap in granted),
        )
        self._record(outcome, ActivityAction.APPROVE_ACCESS, actor_id=admin_id)
        self._notify_requester(outcome, ACCESS_REQUEST_APPROVED)
        if outcome.grant is None:
            raise NotFoundError()
        return outcome.grant

    def deny(
        self,
        admin_id: str,
        request: RequestRef,
        reason: Optional[str] = None,
    ) -> AccessRequest:
        request_id = _request_id(request)

        def _deny(session: Session) -> _Outcome:
            _, room = self._load_for_admin(session, admin_id, request_id)
            won = self._requests.transition(
                request_id,
                to_status=RequestStatus.DENIED,
                resolved_by=admin_id,
                resolved_at=self._clock.now(),
                note=reason,
                session=session,
            )
            if not won:
                raise AlreadyResolvedError()
            return _Outcome(
                request=self._reload(session, request_id),
                room=room,
                actor_name=self._name(session, admin_id),
            )

        outcome = run_in_session(_deny, session_factory=self._session_factory)
        LOGGER.info("Access request %s denied by %s", request_id, admin_id)
        self._record(outcome, ActivityAction.DENY_ACCESS, actor_id=admin_id)
        self._notify_requester(outcome, ACCESS_REQUEST_DENIED)
        return outcome.request

    def withdraw(self, requester_id: str, request: RequestRef) -> AccessRequest:
        request_id = _request_id(request)

        def _withdraw(session: Session) -> _Outcome:
            record = self._requests.get(request_id, session=session)
            if record is None:
                raise NotFoundError()
            if record.requester_id != requester_id:
                raise ForbiddenError()
            if record.status != RequestStatus.PENDING.value:
                raise AlreadyResolvedError()
            room_record = self._rooms.get(record.room_id, session=session)
            if room_record is None:
                raise NotFoundError()
            won = self._requests.transition(
                request_id,
                to_status=RequestStatus.WITHDRAWN,
                resolved_by=requester_id,
                resolved_at=self._clock.now(),
                session=session,
            )
            if not won:
                raise AlreadyResolvedError()
            return _Outcome(
                request=self._reload(session, request_id),
                room=room_from_record(room_record),
                actor_name=self._name(session, requester_id),
            )

        outcome = run_in_session(_withdraw, session_factory=self._session_factory)
        LOGGER.info("Access request %s withdrawn by %s", request_id, requester_id)
        self._record(outcome, ActivityAction.WITHDRAW_ACCESS)
        return outcome.request

    # ----------------------------------------------------------------- queries

    def get(self, principal_id: str, request_id: str) -> AccessRequest:
        """The requester or a room admin may read a request; anyone else gets NotFound."""

        def _get(session: Session) -> AccessRequest:
            record = self._requests.get(request_id, session=session)
            if record is None:
                raise NotFoundError()
            if record.requester_id != principal_id:
                decision = self.permissions.check_in_session(
                    session, principal_id, Capability.ADMIN, record.room_id
                )
                if not decision.allowed:
                    raise NotFoundError()
            return request_from_record(record)

        return run_in_session(_get, session_factory=self._session_factory)

    def list_for_room(
        self,
        admin_id: str,
        room_id: str,
        status: Optional[RequestStatus] = None,
    ) -> list[AccessRequest]:
        def _list(session: Session) -> list[AccessRequest]:
            decision = self.permissions.check_in_session(session, admin_id, Capability.ADMIN, room_id)
            if not decision.allowed:
                raise denial_error(decision)
            records = self._requests.list_for_room(room_id, status=status, session=session)
            return [request_from_record(record) for record in records]

        return run_in_session(_list, session_factory=self._session_factory)

    # ----------------------------------------------------------------- helpers

    def _load_room(self, session: Session, room_id: str) -> DataRoom:
        record: Optional[DataRoomRecord] = self._rooms.get(room_id, session=session)
        if record is None:
            raise NotFoundError()
        return room_from_record(record)

    def _load_for_admin(
        self,
        session: Session,
        admin_id: str,
        request_id: str,
    ) -> tuple[AccessRequestRecord, DataRoom]:
        record = self._requests.get(request_id, session=session)
        if record is None:
            raise NotFoundError()
        room = self._load_room(session, record.room_id)
        decision = self.permissions.check_room(session, admin_id, Capability.ADMIN, room)
        if not decision.allowed:
            raise denial_error(decision)
        if record.status != RequestStatus.PENDING.value:
            raise AlreadyResolvedError()
        return record, room

    def _ensure_accepting(self, room: DataRoom) -> None:
        state = self.permissions.evaluator.lifecycle.evaluate(room, self._clock.now())
        if state.is_archived:
            raise RoomUnavailableError("The data room is archived.")
        if state.is_expired and self.expired_blocks_access_requests:
            raise RoomUnavailableError("The data room has expired.")

    def _reload(self, session: Session, request_id: str) -> AccessRequest:
        record = session.get(AccessRequestRecord, request_id, populate_existing=True)
        if record is None:
            raise NotFoundError()
        return request_from_record(record)

    def _room_admins(self, session: Session, room: DataRoom, *, exclude: str) -> list[str]:
        recipients = [room.owner_id]
        for record in self._grants.list_for_room(room.room_id, session=session):
            grant = grant_from_record(record)
            if grant.is_room_scoped and Capability.ADMIN in grant.capabilities:
                if grant.principal_id not in recipients:
                    recipients.append(grant.principal_id)
        return [recipient for recipient in recipients if recipient != exclude]

    def _name(self, session: Session, principal_id: str) -> str:
        record = self._principals.get(principal_id, session=session)
        if record is None:
            return principal_id
        return principal_from_record(record).name

    def _record(
        self,
        outcome: _Outcome,
        action: ActivityAction,
        *,
        actor_id: Optional[str] = None,
    ) -> None:
        request = outcome.request
        details: dict = {"status": request.status.value}
        if request.folder_id:
            details["folderId"] = request.folder_id
        if request.granted_capabilities:
            details["capabilities"] = sorted(cap.value for cap in request.granted_capabilities)
        self.recorder.record(
            actor_id=actor_id or request.requester_id,
            action=action,
            resource_kind="ACCESS_REQUEST",
            resource_id=request.request_id,
            room_id=request.room_id,
            description=describe_activity(outcome.actor_name, action, "ACCESS_REQUEST"),
            details=details,
        )

    def _notify_requester(self, outcome: _Outcome, event_kind: str) -> None:
        request = outcome.request
        safe_notify(
            self.notifier,
            request.requester_id,
            event_kind,
            {
                "requestId": request.request_id,
                "roomId": request.room_id,
                "roomName": outcome.room.name,
                "folderId": request.folder_id,
                "status": request.status.value,
                "note": request.resolution_note,
                "capabilities": sorted(cap.value for cap in request.granted_capabilities),
            },
        )


def _request_id(request: RequestRef) -> str:
    if isinstance(request, AccessRequest):
        return request.request_id
    return str(request)


__all__ = ["AccessRequestWorkflow", "resolve_grant_capabilities"]
