from __future__ import annotations

from typing import Optional

from dataroom_api.apis.access_requests_api_base import BaseAccessRequestsApi
from dataroom_api.auth.context import require_principal
from dataroom_api.http.errors import bad_request, domain_errors
from dataroom_api.impl.converters import to_access_request, to_grant
from dataroom_api.models.access_request import AccessRequest
from dataroom_api.models.access_request_create_request import AccessRequestCreateRequest
from dataroom_api.models.approve_access_request import ApproveAccessRequest
from dataroom_api.models.deny_access_request import DenyAccessRequest
from dataroom_api.models.grant import Grant
from dataroom_api.service.facade import get_data_room_services


class AccessRequestsApiImpl(BaseAccessRequestsApi):
    async def create_access_request(
        self,
        access_request_create_request: AccessRequestCreateRequest,
    ) -> AccessRequest:
        principal_id = require_principal()
        if access_request_create_request is None:
            raise bad_request("Request body is required.")
        with domain_errors():
            request = get_data_room_services().access_requests.submit(
                principal_id,
                access_request_create_request.data_room_id,
                folder_id=access_request_create_request.folder_id,
                reason=access_request_create_request.reason,
            )
        return to_access_request(request)

    async def get_access_request(self, requestId: str) -> AccessRequest:
        principal_id = require_principal()
        with domain_errors():
            request = get_data_room_services().access_requests.get(principal_id, requestId)
        return to_access_request(request)

    async def approve_access_request(
        self,
        requestId: str,
        approve_access_request: Optional[ApproveAccessRequest],
    ) -> Grant:
        principal_id = require_principal()
        body = approve_access_request or ApproveAccessRequest()
        with domain_errors():
            grant = get_data_room_services().access_requests.approve(
                principal_id,
                requestId,
                body.capabilities,
                role=body.role,
                note=body.message,
            )
        return to_grant(grant)

    async def deny_access_request(
        self,
        requestId: str,
        deny_access_request: Optional[DenyAccessRequest],
    ) -> AccessRequest:
        principal_id = require_principal()
        reason = deny_access_request.reason if deny_access_request is not None else None
        with domain_errors():
            request = get_data_room_services().access_requests.deny(principal_id, requestId, reason)
        return to_access_request(request)

    async def withdraw_access_request(self, requestId: str) -> AccessRequest:
        principal_id = require_principal()
        with domain_errors():
            request = get_data_room_services().access_requests.withdraw(principal_id, requestId)
        return to_access_request(request)
