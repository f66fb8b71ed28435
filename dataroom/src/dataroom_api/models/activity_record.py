# coding: utf-8

"""
    Data Room API (v1)
"""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field, StrictStr
from typing import Any, ClassVar, Dict, Optional
from typing_extensions import Self


class ActivityRecord(BaseModel):
    id: StrictStr
    actor_id: Optional[StrictStr] = Field(default=None, alias="actorId")
    action: StrictStr
    resource_kind: StrictStr = Field(alias="resourceKind")
    resource_id: Optional[StrictStr] = Field(default=None, alias="resourceId")
    data_room_id: Optional[StrictStr] = Field(default=None, alias="dataRoomId")
    description: StrictStr
    details: Optional[Dict[str, Any]] = None
    created_at: datetime = Field(alias="createdAt")
    __properties: ClassVar[list[str]] = [
        "id",
        "actorId",
        "action",
        "resourceKind",
        "resourceId",
        "dataRoomId",
        "description",
        "details",
        "createdAt",
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
