"""Repositories for data rooms and folders."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from dataroom_api.db.models import DataRoomRecord, FolderRecord, GrantRecord
from dataroom_api.domain.models import DataRoom, Folder, as_utc


class DataRoomRepository:
    def get(self, room_id: str, *, session: Session) -> Optional[DataRoomRecord]:
        return session.get(DataRoomRecord, room_id)

    def save(self, record: DataRoomRecord, *, session: Session) -> DataRoomRecord:
        session.add(record)
        return record

    def list_for_principal(self, principal_id: str, *, session: Session) -> list[DataRoomRecord]:
        """Rooms the principal owns or holds at least one grant on."""
        granted_rooms = select(GrantRecord.room_id).where(GrantRecord.principal_id == principal_id)
        stmt = (
            select(DataRoomRecord)
            .where(
                or_(
                    DataRoomRecord.owner_id == principal_id,
                    DataRoomRecord.id.in_(granted_rooms),
                )
            )
            .order_by(DataRoomRecord.created_at.desc(), DataRoomRecord.id)
        )
        return list(session.execute(stmt).scalars().all())

    def list_expired_candidates(self, *, cutoff: datetime, session: Session) -> list[DataRoomRecord]:
        stmt = (
            select(DataRoomRecord)
            .where(
                DataRoomRecord.archived_at.is_(None),
                DataRoomRecord.expires_at.is_not(None),
                DataRoomRecord.expires_at <= cutoff,
            )
            .order_by(DataRoomRecord.expires_at)
        )
        return list(session.execute(stmt).scalars().all())

    def mark_archived(
        self,
        room_id: str,
        *,
        archived_at: datetime,
        archived_by: str,
        session: Session,
        expires_before: Optional[datetime] = None,
    ) -> bool:
        """Archive the room unless it already is; returns whether this call archived it.

        With ``expires_before`` the row must still expire at or before that instant,
        so an extension committed after the caller read the room wins.
        """
        statement = update(DataRoomRecord).where(
            DataRoomRecord.id == room_id, DataRoomRecord.archived_at.is_(None)
        )
        if expires_before is not None:
            statement = statement.where(
                DataRoomRecord.expires_at.is_not(None),
                DataRoomRecord.expires_at <= expires_before,
            )
        result = session.execute(
            statement
            .values(archived_at=archived_at, archived_by=archived_by, updated_at=archived_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def clear_archived(self, room_id: str, *, updated_at: datetime, session: Session) -> bool:
        result = session.execute(
            update(DataRoomRecord)
            .where(DataRoomRecord.id == room_id, DataRoomRecord.archived_at.is_not(None))
            .values(archived_at=None, archived_by=None, updated_at=updated_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class FolderRepository:
    def get(self, folder_id: str, *, session: Session) -> Optional[FolderRecord]:
        return session.get(FolderRecord, folder_id)

    def save(self, record: FolderRecord, *, session: Session) -> FolderRecord:
        session.add(record)
        return record

    def list_for_room(self, room_id: str, *, session: Session) -> list[FolderRecord]:
        stmt = select(FolderRecord).where(FolderRecord.room_id == room_id).order_by(FolderRecord.name)
        return list(session.execute(stmt).scalars().all())

    def ancestry(self, folder_id: str, *, room_id: str, session: Session) -> list[str]:
        """Return ``[folder_id, parent, grandparent, ...]`` or ``[]`` if the folder is not in the room."""
        chain: list[str] = []
        seen: set[str] = set()
        current: Optional[str] = folder_id
        while current is not None:
            if current in seen:
                break
            record = session.get(FolderRecord, current)
            if record is None or record.room_id != room_id:
                return []
            seen.add(current)
            chain.append(current)
            current = record.parent_id
        return chain


def room_from_record(record: DataRoomRecord) -> DataRoom:
    return DataRoom(
        room_id=record.id,
        name=record.name,
        owner_id=record.owner_id,
        created_at=as_utc(record.created_at),
        expires_at=as_utc(record.expires_at),
        archived_at=as_utc(record.archived_at),
        archived_by=record.archived_by,
        description=record.description,
        updated_at=as_utc(record.updated_at),
    )


def folder_from_record(record: FolderRecord) -> Folder:
    return Folder(
        folder_id=record.id,
        room_id=record.room_id,
        name=record.name,
        parent_id=record.parent_id,
        created_at=as_utc(record.created_at),
    )
