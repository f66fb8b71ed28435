# coding: utf-8

from typing import Dict, List  # noqa: F401
import importlib
import pkgutil

from dataroom_api.apis.access_requests_api_base import BaseAccessRequestsApi
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
from pydantic import StrictStr
from typing import Optional
from dataroom_api.models.access_request import AccessRequest
from dataroom_api.models.access_request_create_request import AccessRequestCreateRequest
from dataroom_api.models.approve_access_request import ApproveAccessRequest
from dataroom_api.models.deny_access_request import DenyAccessRequest
from dataroom_api.models.error import Error
from dataroom_api.models.grant import Grant
from dataroom_api.security_api import get_token_bearerAuth

router = APIRouter()

ns_pkg = dataroom_api.impl
for _, name, _ in pkgutil.iter_modules(ns_pkg.__path__, ns_pkg.__name__ + "."):
    importlib.import_module(name)


def _impl() -> BaseAccessRequestsApi:
    if not BaseAccessRequestsApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return BaseAccessRequestsApi.subclasses[0]()


@router.post(
    "/api/v1/access-requests",
    responses={
        201: {"model": AccessRequest, "description": "Created"},
        404: {"model": Error, "description": "Not Found"},
        409: {"model": Error, "description": "Conflict"},
    },
    tags=["AccessRequests"],
    summary="Request access to a data room or folder",
    response_model_by_alias=True,
    status_code=201,
)
async def create_access_request(
    access_request_create_request: AccessRequestCreateRequest = Body(None, description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> AccessRequest:
    return await _impl().create_access_request(access_request_create_request)


@router.get(
    "/api/v1/access-requests/{requestId}",
    responses={
        200: {"model": AccessRequest, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["AccessRequests"],
    summary="Get an access request",
    response_model_by_alias=True,
)
async def get_access_request(
    requestId: StrictStr = Path(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> AccessRequest:
    return await _impl().get_access_request(requestId)


@router.post(
    "/api/v1/access-requests/{requestId}/approve",
    responses={
        200: {"model": Grant, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
        409: {"model": Error, "description": "Conflict"},
    },
    tags=["AccessRequests"],
    summary="Approve a pending access request",
    response_model_by_alias=True,
)
async def approve_access_request(
    requestId: StrictStr = Path(..., description=""),
    approve_access_request: Optional[ApproveAccessRequest] = Body(None, description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> Grant:
    return await _impl().approve_access_request(requestId, approve_access_request)


@router.post(
    "/api/v1/access-requests/{requestId}/deny",
    responses={
        200: {"model": AccessRequest, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
        409: {"model": Error, "description": "Conflict"},
    },
    tags=["AccessRequests"],
    summary="Deny a pending access request",
    response_model_by_alias=True,
)
async def deny_access_request(
    requestId: StrictStr = Path(..., description=""),
    deny_access_request: Optional[DenyAccessRequest] = Body(None, description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> AccessRequest:
    return await _impl().deny_access_request(requestId, deny_access_request)


@router.post(
    "/api/v1/access-requests/{requestId}/withdraw",
    responses={
        200: {"model": AccessRequest, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
        409: {"model": Error, "description": "Conflict"},
    },
    tags=["AccessRequests"],
    summary="Withdraw your own pending access request",
    response_model_by_alias=True,
)
async def withdraw_access_request(
    requestId: StrictStr = Path(..., description=""),
    token_bearerAuth: TokenModel = Security(
        get_token_bearerAuth
    ),
) -> AccessRequest:
    return await _impl().withdraw_access_request(requestId)
