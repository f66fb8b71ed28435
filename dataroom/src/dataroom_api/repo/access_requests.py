"""Repository for access request records."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from dataroom_api.db.models import AccessRequestRecord
from dataroom_api.domain.models import (
    AccessRequest,
    Capability,
    RequestStatus,
    as_utc,
    parse_capabilities,
    sorted_capabilities,
)
from dataroom_api.repo.grants import scope_key_for


class AccessRequestRepository:
    def get(self, request_id: str, *, session: Session) -> Optional[AccessRequestRecord]:
        return session.get(AccessRequestRecord, request_id)

    def find_pending(
        self,
        requester_id: str,
        room_id: str,
        folder_id: Optional[str],
        *,
        session: Session,
    ) -> Optional[AccessRequestRecord]:
        stmt = select(AccessRequestRecord).where(
            AccessRequestRecord.requester_id == requester_id,
            AccessRequestRecord.room_id == room_id,
            AccessRequestRecord.scope_key == scope_key_for(folder_id),
            AccessRequestRecord.status == RequestStatus.PENDING.value,
        )
        return session.execute(stmt).scalars().first()

    def add(self, record: AccessRequestRecord, *, session: Session) -> AccessRequestRecord:
        """Insert and flush so the pending-uniqueness index is checked immediately."""
        session.add(record)
        session.flush()
        return record

    def transition(
        self,
        request_id: str,
        *,
        to_status: RequestStatus,
        resolved_by: str,
        resolved_at: datetime,
        note: Optional[str] = None,
        granted: Optional[Iterable[Capability]] = None,
        session: Session,
    ) -> bool:
        """Move a PENDING request to ``to_status``; False if it was no longer PENDING."""
        result = session.execute(
            update(AccessRequestRecord)
            .where(
                AccessRequestRecord.id == request_id,
                AccessRequestRecord.status == RequestStatus.PENDING.value,
            )
            .values(
                status=to_status.value,
                resolved_by=resolved_by,
                resolved_at=resolved_at,
                resolution_note=note,
                granted_capabilities_json=(
                    json.dumps(sorted_capabilities(granted)) if granted is not None else None
                ),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def list_for_room(
        self,
        room_id: str,
        *,
        status: Optional[RequestStatus] = None,
        session: Session,
    ) -> list[AccessRequestRecord]:
        stmt = select(AccessRequestRecord).where(AccessRequestRecord.room_id == room_id)
        if status is not None:
            stmt = stmt.where(AccessRequestRecord.status == status.value)
        stmt = stmt.order_by(AccessRequestRecord.submitted_at.desc(), AccessRequestRecord.id.desc())
        return list(session.execute(stmt).scalars().all())


def request_from_record(record: AccessRequestRecord) -> AccessRequest:
    granted: list = []
    if record.granted_capabilities_json:
        try:
            granted = json.loads(record.granted_capabilities_json)
        except json.JSONDecodeError:
            granted = []
    return AccessRequest(
        request_id=record.id,
        requester_id=record.requester_id,
        room_id=record.room_id,
        folder_id=record.folder_id,
        reason=record.reason,
        status=RequestStatus(record.status),
        submitted_at=as_utc(record.submitted_at),
        resolved_at=as_utc(record.resolved_at),
        resolved_by=record.resolved_by,
        resolution_note=record.resolution_note,
        granted_capabilities=parse_capabilities(granted if isinstance(granted, list) else []),
    )
