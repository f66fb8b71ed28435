# coding: utf-8

"""
    Data Room API (v1)
"""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field, StrictStr
from typing import Any, ClassVar, Dict, List, Optional
from typing_extensions import Self

from dataroom_api.domain.models import Capability


class Grant(BaseModel):
    id: StrictStr
    principal_id: StrictStr = Field(alias="principalId")
    data_room_id: StrictStr = Field(alias="dataRoomId")
    folder_id: Optional[StrictStr] = Field(default=None, alias="folderId")
    capabilities: List[Capability] = Field(default_factory=list)
    granted_at: datetime = Field(alias="grantedAt")
    granted_by: Optional[StrictStr] = Field(default=None, alias="grantedBy")
    __properties: ClassVar[list[str]] = [
        "id",
        "principalId",
        "dataRoomId",
        "folderId",
        "capabilities",
        "grantedAt",
        "grantedBy",
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
