# coding: utf-8

"""
    Data Room API (v1)
"""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field, StrictInt, StrictStr
from typing import Any, ClassVar, Dict, List, Optional
from typing_extensions import Self

from dataroom_api.domain.models import Capability, RoomStatus


class DataRoom(BaseModel):
    """
    A data room with its derived lifecycle state and the caller's capabilities.
    """  # noqa: E501

    id: StrictStr
    name: StrictStr
    description: Optional[StrictStr] = None
    owner_id: StrictStr = Field(alias="ownerId")
    status: RoomStatus = Field(description="Effective status derived from expiresAt and archivedAt.")
    days_until_expiration: Optional[StrictInt] = Field(default=None, alias="daysUntilExpiration")
    show_expiration_banner: bool = Field(default=False, alias="showExpirationBanner")
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")
    archived_at: Optional[datetime] = Field(default=None, alias="archivedAt")
    created_at: datetime = Field(alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    capabilities: List[Capability] = Field(default_factory=list)
    __properties: ClassVar[list[str]] = [
        "id",
        "name",
        "description",
        "ownerId",
        "status",
        "daysUntilExpiration",
        "showExpirationBanner",
        "expiresAt",
        "archivedAt",
        "createdAt",
        "updatedAt",
        "capabilities",
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
