# coding: utf-8

"""
    Data Room API (v1)
"""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, ClassVar, Dict, Optional
from typing_extensions import Self


class ExpirationUpdateRequest(BaseModel):
    """
    New expiration instant; null removes the expiration.
    """  # noqa: E501

    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")
    __properties: ClassVar[list[str]] = ["expiresAt"]

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
