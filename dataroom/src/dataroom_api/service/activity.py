"""Append-only activity trail used for display and audit."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from dataroom_api.db.models import ActivityRecord
from dataroom_api.db.session import SessionFactory, run_in_session
from dataroom_api.domain.models import (
    ActivityAction,
    ActivityEntry,
    ActivityFilter,
    ActivityPage,
    as_utc,
)
from dataroom_api.engine.clock import Clock, SystemClock
from dataroom_api.repo.activity import ActivityRepository

LOGGER = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200


def describe_activity(
    actor_name: str,
    action: str,
    resource_kind: str,
    resource_name: Optional[str] = None,
) -> str:
    """Human readable one-liner for an activity entry."""

    kind = resource_kind.lower().replace("_", " ")
    if action == ActivityAction.UPLOAD:
        return f"{actor_name} uploaded {resource_name or 'a file'}"
    if action == ActivityAction.CREATE:
        if kind == "question":
            return f"{actor_name} asked a new question"
        if resource_name:
            return f"{actor_name} created {kind} {resource_name}"
        return f"{actor_name} created {kind}"
    if action == ActivityAction.ANSWER:
        return f"{actor_name} answered a question"
    if action == ActivityAction.INVITE:
        return f"{actor_name} invited a new user"
    if action == ActivityAction.VIEW:
        if kind == "file" and resource_name:
            return f"{actor_name} viewed {resource_name}"
        return f"{actor_name} accessed the data room"
    if action == ActivityAction.REQUEST_ACCESS:
        return f"{actor_name} requested access"
    if action == ActivityAction.APPROVE_ACCESS:
        return f"{actor_name} approved an access request"
    if action == ActivityAction.DENY_ACCESS:
        return f"{actor_name} denied an access request"
    if action == ActivityAction.WITHDRAW_ACCESS:
        return f"{actor_name} withdrew an access request"
    if action == ActivityAction.MOVE:
        return f"{actor_name} moved {kind} {resource_name or ''}".rstrip()
    if action == ActivityAction.ARCHIVE:
        return f"{actor_name} archived the data room"
    if action == ActivityAction.UNARCHIVE:
        return f"{actor_name} restored the data room"
    if action == ActivityAction.UPDATE_EXPIRATION:
        return f"{actor_name} changed the expiration date"
    return f"{actor_name} performed {str(action).lower()}"


def encode_cursor(created_at: datetime, entry_id: str) -> str:
    return f"{as_utc(created_at).isoformat()}|{entry_id}"


def decode_cursor(cursor: Optional[str]) -> tuple[datetime, str] | None:
    if not cursor:
        return None
    try:
        timestamp, entry_id = cursor.split("|", 1)
        return as_utc(datetime.fromisoformat(timestamp)), entry_id
    except ValueError:
        return None


class ActivityRecorder:
    def __init__(
        self,
        repo: Optional[ActivityRepository] = None,
        *,
        clock: Optional[Clock] = None,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        self._repo = repo or ActivityRepository()
        self._clock = clock or SystemClock()
        self._session_factory = session_factory

    def record(
        self,
        *,
        actor_id: Optional[str],
        action: str,
        resource_kind: str,
        description: str,
        room_id: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Append an entry in its own transaction. Failures are logged, never raised."""
        payload = None
        if details:
            try:
                payload = json.dumps(dict(details), ensure_ascii=False, default=str)
            except (TypeError, ValueError):
                payload = json.dumps({"error": "serialization_failed"})

        record = ActivityRecord(
            actor_id=actor_id,
            action=str(getattr(action, "value", action)),
            resource_kind=resource_kind,
            resource_id=resource_id,
            room_id=room_id,
            description=description,
            details=payload,
            created_at=self._clock.now(),
        )
        try:
            run_in_session(
                lambda session: self._repo.create(record, session=session),
                session_factory=self._session_factory,
            )
        except SQLAlchemyError:
            LOGGER.exception("Failed to record %s activity for room %s", record.action, room_id)
            return False
        return True

    def query(self, activity_filter: ActivityFilter) -> ActivityPage:
        """Entries newest first, bounded by ``limit``; ``next_cursor`` continues the listing."""
        page_size = min(max(activity_filter.limit or 1, 1), MAX_PAGE_SIZE)
        room_ids: Optional[list[str]] = None
        if activity_filter.room_ids is not None:
            room_ids = list(activity_filter.room_ids)
        if activity_filter.room_id is not None:
            if room_ids is not None and activity_filter.room_id not in room_ids:
                return ActivityPage(items=[])
            room_ids = [activity_filter.room_id]
        if room_ids is not None and not room_ids:
            return ActivityPage(items=[])
        cursor_value = decode_cursor(activity_filter.cursor)

        def _list(session):
            rows = self._repo.list_entries(
                limit=page_size,
                cursor_value=cursor_value,
                room_ids=room_ids,
                actions=activity_filter.actions,
                session=session,
            )
            return [_record_to_entry(row) for row in rows]

        entries = run_in_session(_list, session_factory=self._session_factory)

        next_cursor = None
        if len(entries) > page_size:
            last = entries[page_size - 1]
            next_cursor = encode_cursor(last.created_at, last.entry_id)
            entries = entries[:page_size]
        return ActivityPage(items=entries, next_cursor=next_cursor)


def _record_to_entry(row: ActivityRecord) -> ActivityEntry:
    details = None
    if row.details:
        try:
            details = json.loads(row.details)
        except json.JSONDecodeError:
            details = {"raw": row.details}
    return ActivityEntry(
        entry_id=row.id,
        actor_id=row.actor_id,
        action=row.action,
        resource_kind=row.resource_kind,
        resource_id=row.resource_id,
        room_id=row.room_id,
        description=row.description,
        details=details,
        created_at=as_utc(row.created_at),
    )


__all__ = ["ActivityRecorder", "decode_cursor", "describe_activity", "encode_cursor"]
