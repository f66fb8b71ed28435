# coding: utf-8

from typing import ClassVar, Dict, List, Tuple  # noqa: F401

from pydantic import Field, StrictStr
from typing import Optional
from typing_extensions import Annotated
from dataroom_api.models.activity_list import ActivityList


class BaseActivityApi:
    subclasses: ClassVar[Tuple] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        BaseActivityApi.subclasses = BaseActivityApi.subclasses + (cls,)
    async def list_recent_activity(
        self,
        limit: Optional[Annotated[int, Field(ge=1)]],
        data_room_id: Optional[StrictStr],
        cursor: Optional[StrictStr],
    ) -> ActivityList:
        ...
