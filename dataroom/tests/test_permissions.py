from datetime import datetime, timedelta, timezone

import pytest

from dataroom_api.domain.models import ALL_CAPABILITIES, Capability, DataRoom, Grant
from dataroom_api.engine.lifecycle import LifecycleEvaluator
from dataroom_api.engine.permissions import (
    DenialReason,
    PermissionEvaluator,
    fold_capabilities,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
OWNER = "owner"
MEMBER = "member"


def _room(**kwargs) -> DataRoom:
    return DataRoom(room_id="room-1", name="Atlas", owner_id=OWNER, created_at=NOW, **kwargs)


def _grant(capabilities, folder_id=None, principal_id=MEMBER, room_id="room-1") -> Grant:
    return Grant(
        grant_id=f"g-{principal_id}-{folder_id}",
        principal_id=principal_id,
        room_id=room_id,
        folder_id=folder_id,
        capabilities=frozenset(capabilities),
        granted_at=NOW,
    )


@pytest.fixture
def evaluator() -> PermissionEvaluator:
    return PermissionEvaluator(LifecycleEvaluator())


def test_owner_holds_every_capability(evaluator):
    assert evaluator.capabilities(OWNER, _room(), [], now=NOW) == ALL_CAPABILITIES


@pytest.mark.parametrize("capability", list(Capability))
def test_archived_room_denies_non_owner(evaluator, capability):
    room = _room(archived_at=NOW)
    decision = evaluator.check(MEMBER, capability, room, [_grant(ALL_CAPABILITIES)], now=NOW)
    assert not decision.allowed
    assert decision.reason is DenialReason.FORBIDDEN


def test_archived_room_keeps_admin_for_owner_only(evaluator):
    room = _room(archived_at=NOW)
    assert evaluator.can(OWNER, Capability.ADMIN, room, [], now=NOW)
    assert not evaluator.can(OWNER, Capability.VIEW, room, [], now=NOW)
    assert not evaluator.can(OWNER, Capability.DOWNLOAD, room, [], now=NOW)


def test_view_download_grant_allows_download_not_edit(evaluator):
    grants = [_grant({Capability.VIEW, Capability.DOWNLOAD})]
    assert evaluator.can(MEMBER, Capability.DOWNLOAD, _room(), grants, now=NOW)
    assert not evaluator.can(MEMBER, Capability.EDIT, _room(), grants, now=NOW)


def test_folder_grant_covers_subtree_but_not_siblings(evaluator):
    grants = [_grant({Capability.VIEW}, folder_id="a")]
    room = _room()
    assert evaluator.can(MEMBER, Capability.VIEW, room, grants, folder_id="a", ancestry=["a"], now=NOW)
    assert evaluator.can(
        MEMBER, Capability.VIEW, room, grants, folder_id="a-child", ancestry=["a-child", "a"], now=NOW
    )
    assert not evaluator.can(MEMBER, Capability.VIEW, room, grants, folder_id="c", ancestry=["c"], now=NOW)
    assert not evaluator.can(MEMBER, Capability.VIEW, room, grants, now=NOW)


def test_room_and_folder_grants_combine_by_union(evaluator):
    grants = [
        _grant({Capability.VIEW}),
        _grant({Capability.EDIT}, folder_id="a"),
    ]
    caps = evaluator.capabilities(MEMBER, _room(), grants, ancestry=["a"], now=NOW)
    assert caps == frozenset({Capability.VIEW, Capability.EDIT})
    room_caps = evaluator.capabilities(MEMBER, _room(), grants, now=NOW)
    assert room_caps == frozenset({Capability.VIEW})


def test_adding_a_grant_never_removes_capabilities():
    base = [_grant({Capability.VIEW, Capability.DOWNLOAD})]
    before = fold_capabilities(base, principal_id=MEMBER, room_id="room-1", ancestry=["a"])
    after = fold_capabilities(
        base + [_grant({Capability.VIEW}, folder_id="a")],
        principal_id=MEMBER,
        room_id="room-1",
        ancestry=["a"],
    )
    assert before <= after


def test_grants_for_other_principals_and_rooms_are_ignored(evaluator):
    grants = [
        _grant({Capability.VIEW}, principal_id="someone-else"),
        _grant({Capability.VIEW}, room_id="room-2"),
    ]
    assert evaluator.capabilities(MEMBER, _room(), grants, now=NOW) == frozenset()


def test_missing_room_and_missing_grant_look_the_same(evaluator):
    missing = evaluator.check(MEMBER, Capability.VIEW, None, [], now=NOW)
    forbidden = evaluator.check(MEMBER, Capability.VIEW, _room(), [], now=NOW)
    assert missing.reason is DenialReason.NOT_FOUND
    assert forbidden.reason is DenialReason.FORBIDDEN
    assert missing.public_reason == forbidden.public_reason == "not_found"


def test_folder_outside_room_is_not_found(evaluator):
    grants = [_grant(ALL_CAPABILITIES)]
    decision = evaluator.check(MEMBER, Capability.VIEW, _room(), grants, folder_id="x", ancestry=[], now=NOW)
    assert decision.reason is DenialReason.NOT_FOUND


def test_expired_room_keeps_existing_access_by_default(evaluator):
    room = _room(expires_at=NOW - timedelta(days=2))
    grants = [_grant({Capability.VIEW, Capability.DOWNLOAD})]
    assert evaluator.can(MEMBER, Capability.VIEW, room, grants, now=NOW)
    assert evaluator.can(MEMBER, Capability.DOWNLOAD, room, grants, now=NOW)


def test_expired_blocks_downloads_policy():
    evaluator = PermissionEvaluator(LifecycleEvaluator(), expired_blocks_downloads=True)
    room = _room(expires_at=NOW - timedelta(days=2))
    grants = [_grant({Capability.VIEW, Capability.DOWNLOAD})]
    assert evaluator.can(MEMBER, Capability.VIEW, room, grants, now=NOW)
    assert not evaluator.can(MEMBER, Capability.DOWNLOAD, room, grants, now=NOW)
    assert evaluator.can(OWNER, Capability.DOWNLOAD, room, [], now=NOW)
    active = _room(expires_at=NOW + timedelta(days=2))
    assert evaluator.can(MEMBER, Capability.DOWNLOAD, active, grants, now=NOW)


def test_decision_carries_lifecycle(evaluator):
    room = _room(expires_at=NOW + timedelta(days=3))
    decision = evaluator.check(OWNER, Capability.VIEW, room, [], now=NOW)
    assert decision
    assert decision.lifecycle.days_until_expiration == 3
