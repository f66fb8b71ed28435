"""Domain object to API model conversion."""

from __future__ import annotations

from dataroom_api.domain.models import (
    AccessRequest as AccessRequestEntity,
    ActivityEntry,
    Folder as FolderEntity,
    Grant as GrantEntity,
    sorted_capabilities,
)
from dataroom_api.models.access_request import AccessRequest
from dataroom_api.models.activity_record import ActivityRecord
from dataroom_api.models.data_room import DataRoom
from dataroom_api.models.folder import Folder
from dataroom_api.models.grant import Grant
from dataroom_api.service.rooms import RoomView


def to_data_room(view: RoomView) -> DataRoom:
    room = view.room
    return DataRoom(
        id=room.room_id,
        name=room.name,
        description=room.description,
        ownerId=room.owner_id,
        status=view.lifecycle.effective_status,
        daysUntilExpiration=view.lifecycle.days_until_expiration,
        showExpirationBanner=view.lifecycle.needs_banner,
        expiresAt=room.expires_at,
        archivedAt=room.archived_at,
        createdAt=room.created_at,
        updatedAt=room.updated_at,
        capabilities=sorted_capabilities(view.capabilities),
    )


def to_folder(folder: FolderEntity) -> Folder:
    return Folder(
        id=folder.folder_id,
        dataRoomId=folder.room_id,
        parentId=folder.parent_id,
        name=folder.name,
        createdAt=folder.created_at,
    )


def to_access_request(request: AccessRequestEntity) -> AccessRequest:
    return AccessRequest(
        id=request.request_id,
        requesterId=request.requester_id,
        dataRoomId=request.room_id,
        folderId=request.folder_id,
        reason=request.reason,
        status=request.status,
        submittedAt=request.submitted_at,
        resolvedAt=request.resolved_at,
        resolvedBy=request.resolved_by,
        resolutionNote=request.resolution_note,
        grantedCapabilities=sorted_capabilities(request.granted_capabilities),
    )


def to_grant(grant: GrantEntity) -> Grant:
    return Grant(
        id=grant.grant_id,
        principalId=grant.principal_id,
        dataRoomId=grant.room_id,
        folderId=grant.folder_id,
        capabilities=sorted_capabilities(grant.capabilities),
        grantedAt=grant.granted_at,
        grantedBy=grant.granted_by,
    )


def to_activity_record(entry: ActivityEntry) -> ActivityRecord:
    return ActivityRecord(
        id=entry.entry_id,
        actorId=entry.actor_id,
        action=entry.action,
        resourceKind=entry.resource_kind,
        resourceId=entry.resource_id,
        dataRoomId=entry.room_id,
        description=entry.description,
        details=entry.details,
        createdAt=entry.created_at,
    )
