# coding: utf-8

"""
    Data Room API (v1)
"""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictStr
from typing import Any, ClassVar, Dict, List, Optional
from typing_extensions import Self

from dataroom_api.domain.models import AccessRole, Capability


class ApproveAccessRequest(BaseModel):
    """
    Capabilities to grant. An explicit list wins over a role preset; VIEW is always granted.
    """  # noqa: E501

    capabilities: Optional[List[Capability]] = None
    role: Optional[AccessRole] = None
    message: Optional[StrictStr] = None
    __properties: ClassVar[list[str]] = ["capabilities", "role", "message"]

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
