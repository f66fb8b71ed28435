"""Repository for activity records."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from dataroom_api.db.models import ActivityRecord


class ActivityRepository:
    def create(self, record: ActivityRecord, *, session: Session) -> None:
        session.add(record)

    def list_entries(
        self,
        *,
        limit: int,
        cursor_value: Optional[tuple[datetime, str]],
        room_ids: Optional[Iterable[str]],
        actions: Optional[Iterable[str]],
        session: Session,
    ) -> list[ActivityRecord]:
        query = session.query(ActivityRecord)
        if room_ids is not None:
            query = query.filter(ActivityRecord.room_id.in_(list(room_ids)))
        if actions:
            query = query.filter(ActivityRecord.action.in_(list(actions)))
        if cursor_value:
            created_at, entry_id = cursor_value
            query = query.filter(
                or_(
                    ActivityRecord.created_at < created_at,
                    and_(
                        ActivityRecord.created_at == created_at,
                        ActivityRecord.id < entry_id,
                    ),
                )
            )
        return (
            query.order_by(ActivityRecord.created_at.desc(), ActivityRecord.id.desc())
            .limit(limit + 1)
            .all()
        )
