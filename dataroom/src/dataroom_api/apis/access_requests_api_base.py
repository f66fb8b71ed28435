# coding: utf-8

from typing import ClassVar, Dict, List, Tuple  # noqa: F401

from pydantic import StrictStr
from typing import Optional
from dataroom_api.models.access_request import AccessRequest
from dataroom_api.models.access_request_create_request import AccessRequestCreateRequest
from dataroom_api.models.approve_access_request import ApproveAccessRequest
from dataroom_api.models.deny_access_request import DenyAccessRequest
from dataroom_api.models.grant import Grant


class BaseAccessRequestsApi:
    subclasses: ClassVar[Tuple] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        BaseAccessRequestsApi.subclasses = BaseAccessRequestsApi.subclasses + (cls,)
    async def create_access_request(
        self,
        access_request_create_request: AccessRequestCreateRequest,
    ) -> AccessRequest:
        ...


    async def get_access_request(
        self,
        requestId: StrictStr,
    ) -> AccessRequest:
        ...


    async def approve_access_request(
        self,
        requestId: StrictStr,
        approve_access_request: Optional[ApproveAccessRequest],
    ) -> Grant:
        ...


    async def deny_access_request(
        self,
        requestId: StrictStr,
        deny_access_request: Optional[DenyAccessRequest],
    ) -> AccessRequest:
        ...


    async def withdraw_access_request(
        self,
        requestId: StrictStr,
    ) -> AccessRequest:
        ...
