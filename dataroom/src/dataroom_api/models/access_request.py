# coding: utf-8

"""
    Data Room API (v1)
"""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field, StrictStr
from typing import Any, ClassVar, Dict, List, Optional
from typing_extensions import Self

from dataroom_api.domain.models import Capability, RequestStatus


class AccessRequest(BaseModel):
    id: StrictStr
    requester_id: StrictStr = Field(alias="requesterId")
    data_room_id: StrictStr = Field(alias="dataRoomId")
    folder_id: Optional[StrictStr] = Field(default=None, alias="folderId")
    reason: Optional[StrictStr] = None
    status: RequestStatus
    submitted_at: datetime = Field(alias="submittedAt")
    resolved_at: Optional[datetime] = Field(default=None, alias="resolvedAt")
    resolved_by: Optional[StrictStr] = Field(default=None, alias="resolvedBy")
    resolution_note: Optional[StrictStr] = Field(default=None, alias="resolutionNote")
    granted_capabilities: List[Capability] = Field(default_factory=list, alias="grantedCapabilities")
    __properties: ClassVar[list[str]] = [
        "id",
        "requesterId",
        "dataRoomId",
        "folderId",
        "reason",
        "status",
        "submittedAt",
        "resolvedAt",
        "resolvedBy",
        "resolutionNote",
        "grantedCapabilities",
    ]

    model_config = {
        "populate_by_name": True,
        "validate_assignment": True,
        "protected_namespaces": (),
    }

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, json_str: str) -> Self:
        return cls.model_validate_json(json_str)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> Self:
        if obj is None:
            return None
        return cls.model_validate(obj)
