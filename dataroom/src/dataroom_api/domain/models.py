"""Domain models for rooms, grants, access requests and activity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional


class Capability(str, Enum):
    VIEW = "VIEW"
    DOWNLOAD = "DOWNLOAD"
    EDIT = "EDIT"
    ADMIN = "ADMIN"


ALL_CAPABILITIES: FrozenSet[Capability] = frozenset(Capability)


class RoomStatus(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRING = "EXPIRING"
    EXPIRED = "EXPIRED"
    ARCHIVED = "ARCHIVED"


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"
    WITHDRAWN = "WITHDRAWN"


class AccessRole(str, Enum):
    """Role presets an admin may pick instead of an explicit capability set."""

    AUDITOR = "AUDITOR"
    VIEWER = "VIEWER"
    CONTRIBUTOR = "CONTRIBUTOR"
    ADMIN = "ADMIN"


ROLE_CAPABILITIES: Dict[AccessRole, FrozenSet[Capability]] = {
    AccessRole.AUDITOR: frozenset({Capability.VIEW}),
    AccessRole.VIEWER: frozenset({Capability.VIEW, Capability.DOWNLOAD}),
    AccessRole.CONTRIBUTOR: frozenset({Capability.VIEW, Capability.DOWNLOAD, Capability.EDIT}),
    AccessRole.ADMIN: ALL_CAPABILITIES,
}


class ActivityAction(str, Enum):
    UPLOAD = "UPLOAD"
    CREATE = "CREATE"
    ANSWER = "ANSWER"
    INVITE = "INVITE"
    VIEW = "VIEW"
    REQUEST_ACCESS = "REQUEST_ACCESS"
    APPROVE_ACCESS = "APPROVE_ACCESS"
    DENY_ACCESS = "DENY_ACCESS"
    WITHDRAW_ACCESS = "WITHDRAW_ACCESS"
    UPDATE_EXPIRATION = "UPDATE_EXPIRATION"
    ARCHIVE = "ARCHIVE"
    UNARCHIVE = "UNARCHIVE"
    MOVE = "MOVE"


# Actions surfaced by the recent activity feed.
DISPLAY_ACTIONS: FrozenSet[str] = frozenset(
    {
        ActivityAction.UPLOAD.value,
        ActivityAction.CREATE.value,
        ActivityAction.ANSWER.value,
        ActivityAction.INVITE.value,
        ActivityAction.VIEW.value,
    }
)

SYSTEM_ACTOR = "system"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_capabilities(values: Iterable[Any]) -> FrozenSet[Capability]:
    """Parse capability names, ignoring unknown entries."""

    parsed = set()
    for value in values or ():
        if isinstance(value, Capability):
            parsed.add(value)
            continue
        try:
            parsed.add(Capability(str(value).upper()))
        except ValueError:
            continue
    return frozenset(parsed)


def sorted_capabilities(values: Iterable[Capability]) -> List[str]:
    order = list(Capability)
    return [cap.value for cap in sorted(set(values), key=order.index)]


@dataclass(frozen=True)
class Principal:
    principal_id: str
    email: str
    verified: bool = False
    display_name: Optional[str] = None

    @property
    def name(self) -> str:
        return self.display_name or self.email


@dataclass
class DataRoom:
    room_id: str
    name: str
    owner_id: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    archived_by: Optional[str] = None
    description: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None


@dataclass(frozen=True)
class Folder:
    folder_id: str
    room_id: str
    name: str
    parent_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Grant:
    grant_id: str
    principal_id: str
    room_id: str
    capabilities: FrozenSet[Capability]
    granted_at: datetime
    folder_id: Optional[str] = None
    granted_by: Optional[str] = None

    @property
    def is_room_scoped(self) -> bool:
        return self.folder_id is None


@dataclass
class AccessRequest:
    request_id: str
    requester_id: str
    room_id: str
    status: RequestStatus
    submitted_at: datetime
    folder_id: Optional[str] = None
    reason: Optional[str] = None
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    resolution_note: Optional[str] = None
    granted_capabilities: FrozenSet[Capability] = field(default_factory=frozenset)

    @property
    def is_pending(self) -> bool:
        return self.status is RequestStatus.PENDING


@dataclass(frozen=True)
class ActivityEntry:
    entry_id: str
    action: str
    resource_kind: str
    description: str
    created_at: datetime
    actor_id: Optional[str] = None
    room_id: Optional[str] = None
    resource_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


@dataclass
class ActivityFilter:
    limit: int = 20
    room_id: Optional[str] = None
    room_ids: Optional[List[str]] = None
    actions: Optional[FrozenSet[str]] = None
    cursor: Optional[str] = None


@dataclass
class ActivityPage:
    items: List[ActivityEntry]
    next_cursor: Optional[str] = None


__all__ = [
    "ALL_CAPABILITIES",
    "AccessRequest",
    "AccessRole",
    "ActivityAction",
    "ActivityEntry",
    "ActivityFilter",
    "ActivityPage",
    "Capability",
    "DISPLAY_ACTIONS",
    "DataRoom",
    "Folder",
    "Grant",
    "Principal",
    "ROLE_CAPABILITIES",
    "RequestStatus",
    "RoomStatus",
    "SYSTEM_ACTOR",
    "as_utc",
    "parse_capabilities",
    "sorted_capabilities",
]
