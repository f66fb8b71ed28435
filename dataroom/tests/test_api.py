from datetime import timedelta

import pytest

from dataroom_api.domain.models import Capability


@pytest.fixture
def owner(factory):
    return factory.principal("owner@example.com", "Olivia Owner")


@pytest.fixture
def requester(factory):
    return factory.principal("req@example.com", "Rick Requester")


def test_requests_without_token_are_rejected(client):
    response = client.get("/api/v1/data-rooms")
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "unauthorized"

    response = client.get("/api/v1/data-rooms", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


def test_token_for_unknown_principal_is_rejected(client, headers_for):
    response = client.get("/api/v1/data-rooms", headers=headers_for("ghost"))
    assert response.status_code == 401


def test_create_and_fetch_room(client, owner, headers_for, clock):
    headers = headers_for(owner)
    expires_at = (clock.now() + timedelta(days=3)).isoformat()

    created = client.post(
        "/api/v1/data-rooms",
        json={"name": "Project Atlas", "expiresAt": expires_at},
        headers=headers,
    )
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "EXPIRING"
    assert body["daysUntilExpiration"] == 3
    assert body["showExpirationBanner"] is True
    assert body["capabilities"] == ["VIEW", "DOWNLOAD", "EDIT", "ADMIN"]

    fetched = client.get(f"/api/v1/data-rooms/{body['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Project Atlas"

    listed = client.get("/api/v1/data-rooms", headers=headers)
    assert [item["id"] for item in listed.json()["items"]] == [body["id"]]


def test_missing_and_forbidden_rooms_look_identical(client, factory, owner, requester, headers_for):
    room_id = factory.room(owner)
    headers = headers_for(requester)

    forbidden = client.get(f"/api/v1/data-rooms/{room_id}", headers=headers)
    missing = client.get("/api/v1/data-rooms/does-not-exist", headers=headers)

    assert forbidden.status_code == missing.status_code == 404
    assert forbidden.json() == missing.json()
    detail = forbidden.json()["detail"]
    assert detail["error"] == "not_found"
    assert detail["details"] == {"canRequestAccess": True}


def test_request_and_approve_flow(client, factory, owner, requester, headers_for):
    room_id = factory.room(owner)
    requester_headers = headers_for(requester)
    owner_headers = headers_for(owner)

    submitted = client.post(
        "/api/v1/access-requests",
        json={"dataRoomId": room_id, "reason": "Reviewing the deal"},
        headers=requester_headers,
    )
    assert submitted.status_code == 201
    request_id = submitted.json()["id"]
    assert submitted.json()["status"] == "PENDING"

    duplicate = client.post(
        "/api/v1/access-requests",
        json={"dataRoomId": room_id},
        headers=requester_headers,
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"]["message"] == "Request already pending."

    pending = client.get(
        f"/api/v1/data-rooms/{room_id}/access-requests",
        params={"status": "pending"},
        headers=owner_headers,
    )
    assert [item["id"] for item in pending.json()["items"]] == [request_id]

    approved = client.post(
        f"/api/v1/access-requests/{request_id}/approve",
        json={"capabilities": ["DOWNLOAD"]},
        headers=owner_headers,
    )
    assert approved.status_code == 200
    assert approved.json()["capabilities"] == ["VIEW", "DOWNLOAD"]
    assert approved.json()["principalId"] == requester

    again = client.post(f"/api/v1/access-requests/{request_id}/approve", json={}, headers=owner_headers)
    assert again.status_code == 409
    assert again.json()["detail"]["error"] == "already_resolved"

    room = client.get(f"/api/v1/data-rooms/{room_id}", headers=requester_headers)
    assert room.status_code == 200
    assert room.json()["capabilities"] == ["VIEW", "DOWNLOAD"]

    status = client.get(f"/api/v1/access-requests/{request_id}", headers=requester_headers)
    assert status.json()["status"] == "APPROVED"


def test_owner_request_and_archived_room_conflict(client, factory, owner, requester, headers_for):
    room_id = factory.room(owner)
    own = client.post("/api/v1/access-requests", json={"dataRoomId": room_id}, headers=headers_for(owner))
    assert own.status_code == 409

    archived = factory.room(owner, "Old", archived=True)
    blocked = client.post(
        "/api/v1/access-requests",
        json={"dataRoomId": archived},
        headers=headers_for(requester),
    )
    assert blocked.status_code == 409
    assert blocked.json()["detail"]["error"] == "room_unavailable"


def test_withdraw_and_deny(client, factory, owner, requester, headers_for):
    room_id = factory.room(owner)
    requester_headers = headers_for(requester)
    first = client.post("/api/v1/access-requests", json={"dataRoomId": room_id}, headers=requester_headers)

    stranger = factory.principal("stranger@example.com")
    hijack = client.post(f"/api/v1/access-requests/{first.json()['id']}/withdraw", headers=headers_for(stranger))
    assert hijack.status_code == 404

    withdrawn = client.post(f"/api/v1/access-requests/{first.json()['id']}/withdraw", headers=requester_headers)
    assert withdrawn.json()["status"] == "WITHDRAWN"

    second = client.post("/api/v1/access-requests", json={"dataRoomId": room_id}, headers=requester_headers)
    denied = client.post(
        f"/api/v1/access-requests/{second.json()['id']}/deny",
        json={"reason": "Not yet"},
        headers=headers_for(owner),
    )
    assert denied.status_code == 200
    assert denied.json()["status"] == "DENIED"
    assert denied.json()["resolutionNote"] == "Not yet"


def test_expiration_endpoint_validates(client, factory, owner, headers_for, clock):
    room_id = factory.room(owner, expires_in=timedelta(days=5))
    headers = headers_for(owner)

    shorter = client.patch(
        f"/api/v1/data-rooms/{room_id}/expiration",
        json={"expiresAt": (clock.now() + timedelta(days=1)).isoformat()},
        headers=headers,
    )
    assert shorter.status_code == 400

    longer = client.patch(
        f"/api/v1/data-rooms/{room_id}/expiration",
        json={"expiresAt": (clock.now() + timedelta(days=60)).isoformat()},
        headers=headers,
    )
    assert longer.status_code == 200
    assert longer.json()["status"] == "ACTIVE"


def test_folders_endpoints(client, factory, owner, requester, headers_for):
    room_id = factory.room(owner)
    headers = headers_for(owner)

    legal = client.post(f"/api/v1/data-rooms/{room_id}/folders", json={"name": "Legal"}, headers=headers)
    assert legal.status_code == 201
    child = client.post(
        f"/api/v1/data-rooms/{room_id}/folders",
        json={"name": "Contracts", "parentId": legal.json()["id"]},
        headers=headers,
    )
    cycle = client.patch(
        f"/api/v1/data-rooms/{room_id}/folders/{legal.json()['id']}",
        json={"parentId": child.json()["id"]},
        headers=headers,
    )
    assert cycle.status_code == 400

    factory.grant(requester, room_id, {Capability.VIEW}, folder_id=child.json()["id"])
    visible = client.get(f"/api/v1/data-rooms/{room_id}/folders", headers=headers_for(requester))
    assert [item["name"] for item in visible.json()["items"]] == ["Contracts"]


def test_activity_feed(client, factory, owner, requester, headers_for, clock):
    headers = headers_for(owner)
    room = client.post("/api/v1/data-rooms", json={"name": "Atlas"}, headers=headers).json()
    clock.advance(seconds=1)
    client.post(f"/api/v1/data-rooms/{room['id']}/folders", json={"name": "Legal"}, headers=headers)

    feed = client.get("/api/v1/activity", params={"limit": 1}, headers=headers)
    assert feed.status_code == 200
    body = feed.json()
    assert [item["description"] for item in body["items"]] == ["Olivia Owner created folder Legal"]
    assert body["nextCursor"]

    rest = client.get("/api/v1/activity", params={"cursor": body["nextCursor"]}, headers=headers)
    assert [item["action"] for item in rest.json()["items"]] == ["CREATE"]

    hidden = client.get("/api/v1/activity", params={"dataRoomId": room["id"]}, headers=headers_for(requester))
    assert hidden.status_code == 404
