# coding: utf-8

from typing import Dict, List  # noqa: F401
import importlib
import pkgutil

from dataroom_api.apis.data_rooms_api_base import BaseDataRoomsApi
import dataroom_api.impl

from fastapi import (  # noqa: F401
    APIRouter,
    Body,
    Depends,
    HTTPException,
    Path,
    Query,
    Security,
    status,
)

from dataroom_api.models.extra_models import TokenModel  # noqa: F401
from pydantic import Field, StrictStr
from typing import Optional
from typing_extensions import Annotated
from dataroom_api.models.access_request_list import AccessRequestList
from dataroom_api.models.data_room import DataRoom
from dataroom_api.models.data_room_create_request import DataRoomCreateRequest
from dataroom_api.models.data_room_list import DataRoomList
from dataroom_api.models.error import Error
from dataroom_api.models.expiration_update_request import ExpirationUpdateRequest
from dataroom_api.models.folder import Folder
from dataroom_api.models.folder_create_request import FolderCreateRequest
from dataroom_api.models.folder_list import FolderList
from dataroom_api.models.folder_move_request import FolderMoveRequest
from dataroom_api.security_api import get_token_bearerAuth

router = APIRouter()

ns_pkg = dataroom_api.impl
for _, name, _ in pkgutil.iter_modules(ns_pkg.__path__, ns_pkg.__name__ + "."):
    importlib.import_module(name)


def _impl() -> BaseDataRoomsApi:
    if not BaseDataRoomsApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return BaseDataRoomsApi.subclasses[0]()


@router.get(
    "/api/v1/data-rooms",
    responses={
        200: {"model": DataRoomList, "description": "OK"},
    },
    tags=["DataRooms"],
    summary="List data rooms the caller can access",
    response_model_by_alias=True,
)
async def list_data_rooms(
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> DataRoomList:
    return await _impl().list_data_rooms()


@router.post(
    "/api/v1/data-rooms",
    responses={
        201: {"model": DataRoom, "description": "Created"},
        400: {"model": Error, "description": "Bad Request"},
    },
    tags=["DataRooms"],
    summary="Create a data room owned by the caller",
    response_model_by_alias=True,
    status_code=201,
)
async def create_data_room(
    data_room_create_request: DataRoomCreateRequest = Body(None, description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> DataRoom:
    return await _impl().create_data_room(data_room_create_request)


@router.get(
    "/api/v1/data-rooms/{roomId}",
    responses={
        200: {"model": DataRoom, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["DataRooms"],
    summary="Get a data room",
    response_model_by_alias=True,
)
async def get_data_room(
    roomId: StrictStr = Path(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> DataRoom:
    return await _impl().get_data_room(roomId)


@router.patch(
    "/api/v1/data-rooms/{roomId}/expiration",
    responses={
        200: {"model": DataRoom, "description": "OK"},
        400: {"model": Error, "description": "Bad Request"},
        404: {"model": Error, "description": "Not Found"},
        409: {"model": Error, "description": "Conflict"},
    },
    tags=["DataRooms"],
    summary="Extend a data room's expiration",
    response_model_by_alias=True,
)
async def update_data_room_expiration(
    roomId: StrictStr = Path(..., description=""),
    expiration_update_request: ExpirationUpdateRequest = Body(None, description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> DataRoom:
    return await _impl().update_data_room_expiration(roomId, expiration_update_request)


@router.post(
    "/api/v1/data-rooms/{roomId}/archive",
    responses={
        200: {"model": DataRoom, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
        409: {"model": Error, "description": "Conflict"},
    },
    tags=["DataRooms"],
    summary="Archive a data room",
    response_model_by_alias=True,
)
async def archive_data_room(
    roomId: StrictStr = Path(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> DataRoom:
    return await _impl().archive_data_room(roomId)


@router.post(
    "/api/v1/data-rooms/{roomId}/unarchive",
    responses={
        200: {"model": DataRoom, "description": "OK"},
        400: {"model": Error, "description": "Bad Request"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["DataRooms"],
    summary="Restore an archived data room",
    response_model_by_alias=True,
)
async def unarchive_data_room(
    roomId: StrictStr = Path(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> DataRoom:
    return await _impl().unarchive_data_room(roomId)


@router.get(
    "/api/v1/data-rooms/{roomId}/folders",
    responses={
        200: {"model": FolderList, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["DataRooms"],
    summary="List folders visible to the caller",
    response_model_by_alias=True,
)
async def list_folders(
    roomId: StrictStr = Path(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> FolderList:
    return await _impl().list_folders(roomId)


@router.post(
    "/api/v1/data-rooms/{roomId}/folders",
    responses={
        201: {"model": Folder, "description": "Created"},
        400: {"model": Error, "description": "Bad Request"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["DataRooms"],
    summary="Create a folder",
    response_model_by_alias=True,
    status_code=201,
)
async def create_folder(
    roomId: StrictStr = Path(..., description=""),
    folder_create_request: FolderCreateRequest = Body(None, description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> Folder:
    return await _impl().create_folder(roomId, folder_create_request)


@router.patch(
    "/api/v1/data-rooms/{roomId}/folders/{folderId}",
    responses={
        200: {"model": Folder, "description": "OK"},
        400: {"model": Error, "description": "Bad Request"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["DataRooms"],
    summary="Move a folder under a new parent",
    response_model_by_alias=True,
)
async def move_folder(
    roomId: StrictStr = Path(..., description=""),
    folderId: StrictStr = Path(..., description=""),
    folder_move_request: FolderMoveRequest = Body(None, description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> Folder:
    return await _impl().move_folder(roomId, folderId, folder_move_request)


@router.get(
    "/api/v1/data-rooms/{roomId}/access-requests",
    responses={
        200: {"model": AccessRequestList, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["DataRooms"],
    summary="List access requests for a data room",
    response_model_by_alias=True,
)
async def list_room_access_requests(
    roomId: StrictStr = Path(..., description=""),
    status: Annotated[Optional[StrictStr], Field(description="Filter by request status")] = Query(None, description="Filter by request status", alias="status"),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> AccessRequestList:
    return await _impl().list_room_access_requests(roomId, status)
