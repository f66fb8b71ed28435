"""Capability evaluation for principals against rooms and folder subtrees.

The evaluator is a pure function of its inputs: the room, the target folder's
ancestry, the principal's grants and the current instant. Denials are returned
as values; nothing here raises for an unauthorized caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Sequence

from dataroom_api.domain.models import (
    ALL_CAPABILITIES,
    Capability,
    DataRoom,
    Grant,
    RoomStatus,
)
from dataroom_api.engine.lifecycle import LifecycleEvaluator, LifecycleState


class DenialReason(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"


# Missing resources and missing grants look the same to callers.
PUBLIC_DENIAL = "not_found"


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    capability: Capability
    reason: Optional[DenialReason] = None
    lifecycle: Optional[LifecycleState] = None

    def __bool__(self) -> bool:
        return self.allowed

    @property
    def public_reason(self) -> Optional[str]:
        return None if self.allowed else PUBLIC_DENIAL


def fold_capabilities(
    grants: Iterable[Grant],
    *,
    principal_id: str,
    room_id: str,
    ancestry: Sequence[str] = (),
) -> FrozenSet[Capability]:
    """Union the capabilities of every grant whose scope covers the target.

    ``ancestry`` lists the target folder and its ancestors; it is empty when
    the target is the room itself, in which case only room-wide grants apply.
    """

    in_scope = set(ancestry)
    union: set[Capability] = set()
    for grant in grants:
        if grant.principal_id != principal_id or grant.room_id != room_id:
            continue
        if grant.folder_id is not None and grant.folder_id not in in_scope:
            continue
        union.update(grant.capabilities)
    return frozenset(union)


class PermissionEvaluator:
    def __init__(
        self,
        lifecycle: Optional[LifecycleEvaluator] = None,
        *,
        expired_blocks_downloads: bool = False,
    ) -> None:
        self.lifecycle = lifecycle or LifecycleEvaluator()
        self.expired_blocks_downloads = expired_blocks_downloads

    def capabilities(
        self,
        principal_id: str,
        room: DataRoom,
        grants: Iterable[Grant],
        *,
        ancestry: Sequence[str] = (),
        now: datetime,
        state: Optional[LifecycleState] = None,
    ) -> FrozenSet[Capability]:
        state = state or self.lifecycle.evaluate(room, now)
        is_owner = principal_id == room.owner_id
        if state.effective_status is RoomStatus.ARCHIVED:
            # Owners keep ADMIN so they can still read metadata and unarchive.
            return frozenset({Capability.ADMIN}) if is_owner else frozenset()
        if is_owner:
            return ALL_CAPABILITIES
        granted = fold_capabilities(
            grants,
            principal_id=principal_id,
            room_id=room.room_id,
            ancestry=ancestry,
        )
        if state.is_expired and self.expired_blocks_downloads:
            granted = granted - {Capability.DOWNLOAD}
        return granted

    def check(
        self,
        principal_id: str,
        capability: Capability,
        room: Optional[DataRoom],
        grants: Iterable[Grant],
        *,
        folder_id: Optional[str] = None,
        ancestry: Sequence[str] = (),
        now: datetime,
    ) -> AccessDecision:
        if room is None:
            return AccessDecision(False, capability, DenialReason.NOT_FOUND)
        if folder_id is not None and (not ancestry or ancestry[0] != folder_id):
            return AccessDecision(False, capability, DenialReason.NOT_FOUND)
        state = self.lifecycle.evaluate(room, now)
        effective = self.capabilities(
            principal_id,
            room,
            grants,
            ancestry=ancestry,
            now=now,
            state=state,
        )
        if capability in effective:
            return AccessDecision(True, capability, lifecycle=state)
        return AccessDecision(False, capability, DenialReason.FORBIDDEN, lifecycle=state)

    def can(
        self,
        principal_id: str,
        capability: Capability,
        room: Optional[DataRoom],
        grants: Iterable[Grant],
        *,
        folder_id: Optional[str] = None,
        ancestry: Sequence[str] = (),
        now: datetime,
    ) -> bool:
        return self.check(
            principal_id,
            capability,
            room,
            grants,
            folder_id=folder_id,
            ancestry=ancestry,
            now=now,
        ).allowed


__all__ = [
    "AccessDecision",
    "DenialReason",
    "PUBLIC_DENIAL",
    "PermissionEvaluator",
    "fold_capabilities",
]
