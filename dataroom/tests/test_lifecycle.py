from datetime import datetime, timedelta, timezone

import pytest

from dataroom_api.domain.models import DataRoom, RoomStatus
from dataroom_api.engine.lifecycle import LifecycleEvaluator, days_until, evaluate_lifecycle

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _room(expires_at=None, archived_at=None) -> DataRoom:
    return DataRoom(
        room_id="room-1",
        name="Atlas",
        owner_id="owner",
        created_at=NOW - timedelta(days=30),
        expires_at=expires_at,
        archived_at=archived_at,
    )


def test_room_without_expiration_is_active():
    state = evaluate_lifecycle(_room(), NOW)
    assert state.effective_status is RoomStatus.ACTIVE
    assert state.days_until_expiration is None
    assert not state.needs_banner


def test_room_expiring_in_three_days():
    state = evaluate_lifecycle(_room(NOW + timedelta(days=3)), NOW)
    assert state.effective_status is RoomStatus.EXPIRING
    assert state.days_until_expiration == 3
    assert state.needs_banner


def test_past_expiration_is_expired():
    state = evaluate_lifecycle(_room(NOW - timedelta(hours=1)), NOW)
    assert state.effective_status is RoomStatus.EXPIRED
    assert state.days_until_expiration <= 0
    assert state.is_expired


def test_expiration_at_exactly_now_is_expired():
    state = evaluate_lifecycle(_room(NOW), NOW)
    assert state.effective_status is RoomStatus.EXPIRED
    assert state.days_until_expiration == 0


@pytest.mark.parametrize(
    "delta, expected_days, expected_status",
    [
        (timedelta(microseconds=1), 1, RoomStatus.EXPIRING),
        (timedelta(days=3) - timedelta(microseconds=1), 3, RoomStatus.EXPIRING),
        (timedelta(days=7), 7, RoomStatus.EXPIRING),
        (timedelta(days=7, microseconds=1), 8, RoomStatus.ACTIVE),
        (timedelta(days=30), 30, RoomStatus.ACTIVE),
        (-timedelta(hours=12), 0, RoomStatus.EXPIRED),
        (-timedelta(days=1, hours=12), -1, RoomStatus.EXPIRED),
    ],
)
def test_days_are_rounded_up_from_the_instant_difference(delta, expected_days, expected_status):
    state = evaluate_lifecycle(_room(NOW + delta), NOW)
    assert state.days_until_expiration == expected_days
    assert state.effective_status is expected_status


def test_archived_room_ignores_expiration():
    state = evaluate_lifecycle(_room(NOW + timedelta(days=90), archived_at=NOW), NOW)
    assert state.effective_status is RoomStatus.ARCHIVED
    assert state.days_until_expiration is None


def test_naive_datetimes_are_treated_as_utc():
    naive_now = NOW.replace(tzinfo=None)
    assert days_until(naive_now + timedelta(days=2), NOW) == 2
    state = evaluate_lifecycle(_room(naive_now + timedelta(days=2)), naive_now)
    assert state.effective_status is RoomStatus.EXPIRING


def test_offset_datetimes_compare_on_the_instant():
    plus_two = timezone(timedelta(hours=2))
    expires_at = (NOW + timedelta(days=1)).astimezone(plus_two)
    assert days_until(expires_at, NOW) == 1


def test_expiring_window_is_configurable():
    evaluator = LifecycleEvaluator(expiring_window_days=14)
    state = evaluator.evaluate(_room(NOW + timedelta(days=10)), NOW)
    assert state.effective_status is RoomStatus.EXPIRING
    default_state = LifecycleEvaluator().evaluate(_room(NOW + timedelta(days=10)), NOW)
    assert default_state.effective_status is RoomStatus.ACTIVE


def test_evaluation_is_deterministic():
    room = _room(NOW + timedelta(days=5))
    assert evaluate_lifecycle(room, NOW) == evaluate_lifecycle(room, NOW)


def test_archive_due_requires_configured_grace():
    room = _room(NOW - timedelta(days=365))
    assert not LifecycleEvaluator().archive_due(room, NOW)


def test_archive_due_after_grace_window():
    evaluator = LifecycleEvaluator(archive_grace=timedelta(days=30))
    assert not evaluator.archive_due(_room(NOW - timedelta(days=29)), NOW)
    assert evaluator.archive_due(_room(NOW - timedelta(days=30)), NOW)
    assert not evaluator.archive_due(_room(NOW - timedelta(days=60), archived_at=NOW), NOW)
    assert not evaluator.archive_due(_room(NOW + timedelta(days=1)), NOW)
