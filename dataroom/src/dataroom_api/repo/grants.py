"""Repository for capability grants."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from dataroom_api.db.models import ROOM_SCOPE_KEY, GrantRecord
from dataroom_api.domain.models import (
    Capability,
    Grant,
    as_utc,
    parse_capabilities,
    sorted_capabilities,
)


def scope_key_for(folder_id: Optional[str]) -> str:
    return folder_id or ROOM_SCOPE_KEY


class GrantRepository:
    def list_for_principal(
        self,
        principal_id: str,
        *,
        room_id: Optional[str] = None,
        session: Session,
    ) -> list[GrantRecord]:
        stmt = select(GrantRecord).where(GrantRecord.principal_id == principal_id)
        if room_id:
            stmt = stmt.where(GrantRecord.room_id == room_id)
        return list(session.execute(stmt).scalars().all())

    def list_for_room(self, room_id: str, *, session: Session) -> list[GrantRecord]:
        stmt = select(GrantRecord).where(GrantRecord.room_id == room_id).order_by(GrantRecord.granted_at)
        return list(session.execute(stmt).scalars().all())

    def get_scoped(
        self,
        principal_id: str,
        room_id: str,
        folder_id: Optional[str],
        *,
        session: Session,
    ) -> Optional[GrantRecord]:
        stmt = select(GrantRecord).where(
            GrantRecord.principal_id == principal_id,
            GrantRecord.room_id == room_id,
            GrantRecord.scope_key == scope_key_for(folder_id),
        )
        return session.execute(stmt).scalar_one_or_none()

    def upsert_union(
        self,
        *,
        principal_id: str,
        room_id: str,
        folder_id: Optional[str],
        capabilities: Iterable[Capability],
        granted_by: Optional[str],
        granted_at: datetime,
        session: Session,
    ) -> GrantRecord:
        """Create the grant for this scope or union ``capabilities`` into the existing one."""
        wanted = frozenset(capabilities)
        existing = self.get_scoped(principal_id, room_id, folder_id, session=session)
        if existing is None:
            record = GrantRecord(
                principal_id=principal_id,
                room_id=room_id,
                folder_id=folder_id,
                scope_key=scope_key_for(folder_id),
                capabilities_json=_serialize_capabilities(wanted),
                granted_by=granted_by,
                granted_at=granted_at,
                updated_at=granted_at,
            )
            session.add(record)
            session.flush()
            return record
        current = parse_capabilities(_parse_capabilities(existing.capabilities_json))
        merged = current | wanted
        if merged != current:
            existing.capabilities_json = _serialize_capabilities(merged)
            existing.updated_at = granted_at
            session.add(existing)
        return existing


def _serialize_capabilities(capabilities: Iterable[Capability]) -> str:
    return json.dumps(sorted_capabilities(capabilities), ensure_ascii=True)


def _parse_capabilities(value: Optional[str]) -> list[str]:
    if not value:
        return []
    try:
        payload = json.loads(value)
    except json.JSONDecodeError:
        return []
    if isinstance(payload, list):
        return [str(item) for item in payload if item is not None]
    return []


def grant_from_record(record: GrantRecord) -> Grant:
    return Grant(
        grant_id=record.id,
        principal_id=record.principal_id,
        room_id=record.room_id,
        folder_id=record.folder_id,
        capabilities=parse_capabilities(_parse_capabilities(record.capabilities_json)),
        granted_at=as_utc(record.granted_at),
        granted_by=record.granted_by,
    )
