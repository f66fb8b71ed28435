import asyncio
from datetime import timedelta

import pytest

from dataroom_api.domain.errors import (
    ForbiddenError,
    NotFoundError,
    RoomUnavailableError,
    ValidationError,
)
from dataroom_api.domain.models import ActivityFilter, Capability, RoomStatus, SYSTEM_ACTOR


@pytest.fixture
def owner(factory):
    return factory.principal("owner@example.com", "Olivia Owner")


@pytest.fixture
def member(factory):
    return factory.principal("member@example.com", "Mel Member")


def test_create_room_validates_input(services, owner, clock):
    view = services.rooms.create_room(owner, "  Project Atlas  ", expires_at=clock.now() + timedelta(days=3))
    assert view.room.name == "Project Atlas"
    assert view.lifecycle.effective_status is RoomStatus.EXPIRING
    assert view.lifecycle.days_until_expiration == 3
    assert view.capabilities == frozenset(Capability)

    with pytest.raises(ValidationError):
        services.rooms.create_room(owner, "   ")
    with pytest.raises(ValidationError):
        services.rooms.create_room(owner, "x" * 256)
    with pytest.raises(ValidationError):
        services.rooms.create_room(owner, "Late", expires_at=clock.now() - timedelta(minutes=1))
    with pytest.raises(ValidationError):
        services.rooms.create_room("nobody", "Orphan")


def test_list_rooms_reflects_effective_access(services, factory, owner, member):
    granted = factory.room(owner, "Granted")
    folder_only = factory.room(owner, "Folder only")
    legal = factory.folder(folder_only, "Legal")
    archived = factory.room(owner, "Archived", archived=True)
    factory.room(owner, "Private")
    factory.grant(member, granted, {Capability.VIEW})
    factory.grant(member, folder_only, {Capability.VIEW}, folder_id=legal)
    factory.grant(member, archived, {Capability.VIEW})

    names = {view.room.name for view in services.rooms.list_rooms(member)}
    assert names == {"Granted", "Folder only"}

    owned = {view.room.name: view for view in services.rooms.list_rooms(owner)}
    assert set(owned) == {"Granted", "Folder only", "Archived", "Private"}
    assert owned["Archived"].capabilities == frozenset({Capability.ADMIN})
    assert owned["Archived"].lifecycle.effective_status is RoomStatus.ARCHIVED


def test_get_room_hides_rooms_without_access(services, factory, owner, member):
    room_id = factory.room(owner)
    with pytest.raises(ForbiddenError):
        services.rooms.get_room(member, room_id)
    with pytest.raises(NotFoundError):
        services.rooms.get_room(member, "missing")

    factory.grant(member, room_id, {Capability.VIEW, Capability.DOWNLOAD})
    view = services.rooms.get_room(member, room_id)
    assert view.capabilities == frozenset({Capability.VIEW, Capability.DOWNLOAD})


def test_folder_grantee_can_open_the_rooms_it_lists(services, factory, owner, member):
    room_id = factory.room(owner, "Folder only")
    legal = factory.folder(room_id, "Legal")
    factory.grant(member, room_id, {Capability.VIEW}, folder_id=legal)

    assert [view.room.room_id for view in services.rooms.list_rooms(member)] == [room_id]
    view = services.rooms.get_room(member, room_id)
    assert view.room.name == "Folder only"
    assert view.capabilities == frozenset()

    archived = factory.room(owner, "Archived", archived=True)
    vault = factory.folder(archived, "Vault")
    factory.grant(member, archived, {Capability.VIEW}, folder_id=vault)
    with pytest.raises(ForbiddenError):
        services.rooms.get_room(member, archived)


def test_owner_can_still_open_an_archived_room(services, factory, owner):
    room_id = factory.room(owner, archived=True)
    view = services.rooms.get_room(owner, room_id)
    assert view.lifecycle.effective_status is RoomStatus.ARCHIVED


def test_update_expiration_only_extends(services, factory, owner, member, clock):
    room_id = factory.room(owner, expires_in=timedelta(days=5))
    later = clock.now() + timedelta(days=30)

    view = services.rooms.update_expiration(owner, room_id, later)
    assert view.room.expires_at == later
    assert view.lifecycle.effective_status is RoomStatus.ACTIVE
    clock.advance(minutes=1)

    with pytest.raises(ValidationError):
        services.rooms.update_expiration(owner, room_id, later - timedelta(days=1))
    with pytest.raises(ValidationError):
        services.rooms.update_expiration(owner, room_id, clock.now() - timedelta(days=1))

    cleared = services.rooms.update_expiration(owner, room_id, None)
    assert cleared.room.expires_at is None

    entries = services.activity.query(
        ActivityFilter(room_id=room_id, actions=frozenset({"UPDATE_EXPIRATION"}))
    ).items
    assert len(entries) == 2
    assert entries[-1].details["expiresAt"] == later.isoformat()


def test_update_expiration_needs_edit(services, factory, owner, member, clock):
    room_id = factory.room(owner, expires_in=timedelta(days=2))
    factory.grant(member, room_id, {Capability.VIEW})
    with pytest.raises(ForbiddenError):
        services.rooms.update_expiration(member, room_id, clock.now() + timedelta(days=10))

    factory.grant(member, room_id, {Capability.EDIT})
    view = services.rooms.update_expiration(member, room_id, clock.now() + timedelta(days=10))
    assert view.lifecycle.days_until_expiration == 10


def test_expired_room_can_be_reopened_by_extension(services, factory, owner, clock):
    room_id = factory.room(owner, expires_in=-timedelta(days=2))
    assert services.rooms.get_room(owner, room_id).lifecycle.effective_status is RoomStatus.EXPIRED

    view = services.rooms.update_expiration(owner, room_id, clock.now() + timedelta(days=14))
    assert view.lifecycle.effective_status is RoomStatus.ACTIVE


def test_archived_room_cannot_be_extended(services, factory, owner, clock):
    room_id = factory.room(owner, archived=True)
    with pytest.raises(RoomUnavailableError):
        services.rooms.update_expiration(owner, room_id, clock.now() + timedelta(days=10))


def test_archive_and_unarchive(services, factory, owner, member):
    room_id = factory.room(owner)
    factory.grant(member, room_id, {Capability.VIEW, Capability.EDIT})

    with pytest.raises(ForbiddenError):
        services.rooms.archive(member, room_id)

    archived = services.rooms.archive(owner, room_id)
    assert archived.room.archived_by == owner
    assert archived.lifecycle.effective_status is RoomStatus.ARCHIVED
    assert not services.permissions.can(member, Capability.VIEW, room_id)
    with pytest.raises(RoomUnavailableError):
        services.rooms.archive(owner, room_id)

    with pytest.raises(ForbiddenError):
        services.rooms.unarchive(member, room_id)
    restored = services.rooms.unarchive(owner, room_id)
    assert restored.lifecycle.effective_status is RoomStatus.ACTIVE
    assert services.permissions.can(member, Capability.EDIT, room_id)

    with pytest.raises(ValidationError):
        services.rooms.unarchive(owner, room_id)
    with pytest.raises(NotFoundError):
        services.rooms.unarchive(owner, "missing")


def test_folder_tree_and_moves(services, factory, owner, member):
    room_id = factory.room(owner)
    legal = services.rooms.create_folder(owner, room_id, "Legal")
    contracts = services.rooms.create_folder(owner, room_id, "Contracts", parent_id=legal.folder_id)
    finance = services.rooms.create_folder(owner, room_id, "Finance")
    assert contracts.parent_id == legal.folder_id

    with pytest.raises(ValidationError):
        services.rooms.move_folder(owner, room_id, legal.folder_id, contracts.folder_id)
    with pytest.raises(ValidationError):
        services.rooms.move_folder(owner, room_id, legal.folder_id, legal.folder_id)

    moved = services.rooms.move_folder(owner, room_id, contracts.folder_id, finance.folder_id)
    assert moved.parent_id == finance.folder_id
    assert services.rooms.move_folder(owner, room_id, contracts.folder_id, None).parent_id is None

    other_room = factory.room(owner, "Other")
    with pytest.raises(NotFoundError):
        services.rooms.create_folder(owner, other_room, "Stray", parent_id=legal.folder_id)
    with pytest.raises(ForbiddenError):
        services.rooms.create_folder(member, room_id, "Sneaky")


def test_folder_edit_grant_is_limited_to_its_subtree(services, factory, owner, member):
    room_id = factory.room(owner)
    legal = factory.folder(room_id, "Legal")
    finance = factory.folder(room_id, "Finance")
    factory.grant(member, room_id, {Capability.VIEW, Capability.EDIT}, folder_id=legal)

    nested = services.rooms.create_folder(member, room_id, "NDAs", parent_id=legal)
    assert nested.parent_id == legal
    with pytest.raises(ForbiddenError):
        services.rooms.create_folder(member, room_id, "Budget", parent_id=finance)
    with pytest.raises(ForbiddenError):
        services.rooms.move_folder(member, room_id, nested.folder_id, finance)

    # The room root needs a room-scoped EDIT grant, for new folders and moves alike.
    with pytest.raises(ForbiddenError):
        services.rooms.create_folder(member, room_id, "Root level")
    with pytest.raises(ForbiddenError):
        services.rooms.move_folder(member, room_id, nested.folder_id, None)
    (still_nested,) = [
        folder for folder in services.rooms.list_folders(member, room_id) if folder.name == "NDAs"
    ]
    assert still_nested.parent_id == legal


def test_list_folders_filters_by_visibility(services, factory, owner, member):
    room_id = factory.room(owner)
    legal = factory.folder(room_id, "Legal")
    contracts = factory.folder(room_id, "Contracts", parent_id=legal)
    factory.folder(room_id, "Finance")
    factory.grant(member, room_id, {Capability.VIEW}, folder_id=legal)

    assert {folder.name for folder in services.rooms.list_folders(owner, room_id)} == {
        "Legal",
        "Contracts",
        "Finance",
    }
    visible = services.rooms.list_folders(member, room_id)
    assert {folder.folder_id for folder in visible} == {legal, contracts}

    stranger = factory.principal("stranger@example.com")
    with pytest.raises(NotFoundError):
        services.rooms.list_folders(stranger, room_id)


def test_sweeper_archives_rooms_past_the_grace_window(make_services, factory, owner):
    services = make_services(archive_grace_days=30)
    overdue = factory.room(owner, "Overdue", expires_in=-timedelta(days=31))
    recent = factory.room(owner, "Recently expired", expires_in=-timedelta(days=10))
    factory.room(owner, "Open ended")

    assert services.sweeper.enabled
    assert services.sweeper.run_once() == [overdue]
    assert services.sweeper.run_once() == []

    view = services.rooms.get_room(owner, overdue)
    assert view.room.archived_by == SYSTEM_ACTOR
    assert services.rooms.get_room(owner, recent).lifecycle.effective_status is RoomStatus.EXPIRED
    (entry,) = services.activity.query(
        ActivityFilter(room_id=overdue, actions=frozenset({"ARCHIVE"}))
    ).items
    assert entry.actor_id == SYSTEM_ACTOR
    assert entry.details == {"reason": "expired"}


def test_sweeper_skips_a_room_extended_after_the_candidate_read(
    make_services, factory, owner, clock, monkeypatch
):
    services = make_services(archive_grace_days=30)
    room_id = factory.room(owner, "Renewed", expires_in=-timedelta(days=31))
    extended_to = clock.now() + timedelta(days=30)
    read_candidates = services.sweeper._rooms.list_expired_candidates

    def _read_then_extend(**kwargs):
        candidates = read_candidates(**kwargs)
        services.rooms.update_expiration(owner, room_id, extended_to)
        return candidates

    monkeypatch.setattr(services.sweeper._rooms, "list_expired_candidates", _read_then_extend)

    assert services.sweeper.run_once() == []
    view = services.rooms.get_room(owner, room_id)
    assert view.room.archived_at is None
    assert view.room.expires_at == extended_to
    assert view.lifecycle.effective_status is RoomStatus.ACTIVE


def test_sweeper_is_disabled_without_grace(services, factory, owner):
    factory.room(owner, expires_in=-timedelta(days=400))
    assert not services.sweeper.enabled
    assert services.sweeper.run_once() == []


@pytest.mark.asyncio
async def test_sweeper_loop_stops_on_event(make_services, factory, owner):
    services = make_services(archive_grace_days=0)
    room_id = factory.room(owner, expires_in=-timedelta(days=1))
    stop = asyncio.Event()

    task = asyncio.create_task(services.sweeper.run_forever(0.01, stop))
    for _ in range(200):
        await asyncio.sleep(0.01)
        if services.permissions.capabilities(owner, room_id) == frozenset({Capability.ADMIN}):
            break
    stop.set()
    await asyncio.wait_for(task, timeout=5)

    assert services.permissions.capabilities(owner, room_id) == frozenset({Capability.ADMIN})
