# coding: utf-8

from typing import Dict, List  # noqa: F401
import importlib
import pkgutil

from dataroom_api.apis.activity_api_base import BaseActivityApi
import dataroom_api.impl

from fastapi import (  # noqa: F401
    APIRouter,
    HTTPException,
    Query,
    Security,
)

from dataroom_api.models.extra_models import TokenModel  # noqa: F401
from pydantic import Field, StrictStr
from typing import Optional
from typing_extensions import Annotated
from dataroom_api.models.activity_list import ActivityList
from dataroom_api.models.error import Error
from dataroom_api.security_api import get_token_bearerAuth

router = APIRouter()

ns_pkg = dataroom_api.impl
for _, name, _ in pkgutil.iter_modules(ns_pkg.__path__, ns_pkg.__name__ + "."):
    importlib.import_module(name)


@router.get(
    "/api/v1/activity",
    responses={
        200: {"model": ActivityList, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Activity"],
    summary="Recent activity across the caller's data rooms",
    response_model_by_alias=True,
)
async def list_recent_activity(
    limit: Optional[Annotated[int, Field(ge=1)]] = Query(None, description="", alias="limit", ge=1),
    data_room_id: Annotated[Optional[StrictStr], Field(description="Restrict to one data room")] = Query(None, description="Restrict to one data room", alias="dataRoomId"),
    cursor: Annotated[Optional[StrictStr], Field(description="Continue after this cursor")] = Query(None, description="Continue after this cursor", alias="cursor"),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> ActivityList:
    if not BaseActivityApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseActivityApi.subclasses[0]().list_recent_activity(limit, data_room_id, cursor)
