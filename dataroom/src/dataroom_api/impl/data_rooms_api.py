from __future__ import annotations

from typing import Optional

from dataroom_api.apis.data_rooms_api_base import BaseDataRoomsApi
from dataroom_api.auth.context import require_principal
from dataroom_api.domain.models import RequestStatus
from dataroom_api.http.errors import bad_request, domain_errors
from dataroom_api.impl.converters import to_access_request, to_data_room, to_folder
from dataroom_api.models.access_request_list import AccessRequestList
from dataroom_api.models.data_room import DataRoom
from dataroom_api.models.data_room_create_request import DataRoomCreateRequest
from dataroom_api.models.data_room_list import DataRoomList
from dataroom_api.models.expiration_update_request import ExpirationUpdateRequest
from dataroom_api.models.folder import Folder
from dataroom_api.models.folder_create_request import FolderCreateRequest
from dataroom_api.models.folder_list import FolderList
from dataroom_api.models.folder_move_request import FolderMoveRequest
from dataroom_api.service.facade import get_data_room_services


class DataRoomsApiImpl(BaseDataRoomsApi):
    async def list_data_rooms(self) -> DataRoomList:
        principal_id = require_principal()
        views = get_data_room_services().rooms.list_rooms(principal_id)
        return DataRoomList(items=[to_data_room(view) for view in views])

    async def create_data_room(self, data_room_create_request: DataRoomCreateRequest) -> DataRoom:
        principal_id = require_principal()
        if data_room_create_request is None:
            raise bad_request("Request body is required.")
        with domain_errors():
            view = get_data_room_services().rooms.create_room(
                principal_id,
                data_room_create_request.name,
                description=data_room_create_request.description,
                expires_at=data_room_create_request.expires_at,
            )
        return to_data_room(view)

    async def get_data_room(self, roomId: str) -> DataRoom:
        principal_id = require_principal()
        with domain_errors():
            view = get_data_room_services().rooms.get_room(principal_id, roomId)
        return to_data_room(view)

    async def update_data_room_expiration(
        self,
        roomId: str,
        expiration_update_request: ExpirationUpdateRequest,
    ) -> DataRoom:
        principal_id = require_principal()
        if expiration_update_request is None:
            raise bad_request("Request body is required.")
        with domain_errors():
            view = get_data_room_services().rooms.update_expiration(
                principal_id,
                roomId,
                expiration_update_request.expires_at,
            )
        return to_data_room(view)

    async def archive_data_room(self, roomId: str) -> DataRoom:
        principal_id = require_principal()
        with domain_errors():
            view = get_data_room_services().rooms.archive(principal_id, roomId)
        return to_data_room(view)

    async def unarchive_data_room(self, roomId: str) -> DataRoom:
        principal_id = require_principal()
        with domain_errors():
            view = get_data_room_services().rooms.unarchive(principal_id, roomId)
        return to_data_room(view)

    async def list_folders(self, roomId: str) -> FolderList:
        principal_id = require_principal()
        with domain_errors():
            folders = get_data_room_services().rooms.list_folders(principal_id, roomId)
        return FolderList(items=[to_folder(folder) for folder in folders])

    async def create_folder(self, roomId: str, folder_create_request: FolderCreateRequest) -> Folder:
        principal_id = require_principal()
        if folder_create_request is None:
            raise bad_request("Request body is required.")
        with domain_errors():
            folder = get_data_room_services().rooms.create_folder(
                principal_id,
                roomId,
                folder_create_request.name,
                parent_id=folder_create_request.parent_id,
            )
        return to_folder(folder)

    async def move_folder(
        self,
        roomId: str,
        folderId: str,
        folder_move_request: FolderMoveRequest,
    ) -> Folder:
        principal_id = require_principal()
        parent_id = folder_move_request.parent_id if folder_move_request is not None else None
        with domain_errors():
            folder = get_data_room_services().rooms.move_folder(principal_id, roomId, folderId, parent_id)
        return to_folder(folder)

    async def list_room_access_requests(self, roomId: str, status: Optional[str]) -> AccessRequestList:
        principal_id = require_principal()
        status_filter = None
        if status:
            try:
                status_filter = RequestStatus(status.upper())
            except ValueError as exc:
                raise bad_request(f"Unknown status '{status}'.") from exc
        with domain_errors():
            requests = get_data_room_services().access_requests.list_for_room(
                principal_id,
                roomId,
                status_filter,
            )
        return AccessRequestList(items=[to_access_request(request) for request in requests])
