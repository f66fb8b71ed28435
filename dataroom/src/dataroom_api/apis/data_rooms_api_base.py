# coding: utf-8

from typing import ClassVar, Dict, List, Tuple  # noqa: F401

from pydantic import StrictStr
from typing import Optional
from dataroom_api.models.access_request_list import AccessRequestList
from dataroom_api.models.data_room import DataRoom
from dataroom_api.models.data_room_create_request import DataRoomCreateRequest
from dataroom_api.models.data_room_list import DataRoomList
from dataroom_api.models.expiration_update_request import ExpirationUpdateRequest
from dataroom_api.models.folder import Folder
from dataroom_api.models.folder_create_request import FolderCreateRequest
from dataroom_api.models.folder_list import FolderList
from dataroom_api.models.folder_move_request import FolderMoveRequest


class BaseDataRoomsApi:
    subclasses: ClassVar[Tuple] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        BaseDataRoomsApi.subclasses = BaseDataRoomsApi.subclasses + (cls,)
    async def list_data_rooms(
        self,
    ) -> DataRoomList:
        ...


    async def create_data_room(
        self,
        data_room_create_request: DataRoomCreateRequest,
    ) -> DataRoom:
        ...


    async def get_data_room(
        self,
        roomId: StrictStr,
    ) -> DataRoom:
        ...


    async def update_data_room_expiration(
        self,
        roomId: StrictStr,
        expiration_update_request: ExpirationUpdateRequest,
    ) -> DataRoom:
        ...


    async def archive_data_room(
        self,
        roomId: StrictStr,
    ) -> DataRoom:
        ...


    async def unarchive_data_room(
        self,
        roomId: StrictStr,
    ) -> DataRoom:
        ...


    async def list_folders(
        self,
        roomId: StrictStr,
    ) -> FolderList:
        ...


    async def create_folder(
        self,
        roomId: StrictStr,
        folder_create_request: FolderCreateRequest,
    ) -> Folder:
        ...


    async def move_folder(
        self,
        roomId: StrictStr,
        folderId: StrictStr,
        folder_move_request: FolderMoveRequest,
    ) -> Folder:
        ...


    async def list_room_access_requests(
        self,
        roomId: StrictStr,
        status: Optional[StrictStr],
    ) -> AccessRequestList:
        ...
