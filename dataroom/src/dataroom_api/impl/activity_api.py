from __future__ import annotations

from typing import Optional

from dataroom_api.apis.activity_api_base import BaseActivityApi
from dataroom_api.auth.context import require_principal
from dataroom_api.http.errors import domain_errors
from dataroom_api.impl.converters import to_activity_record
from dataroom_api.models.activity_list import ActivityList
from dataroom_api.service.facade import get_data_room_services


class ActivityApiImpl(BaseActivityApi):
    async def list_recent_activity(
        self,
        limit: Optional[int],
        data_room_id: Optional[str],
        cursor: Optional[str],
    ) -> ActivityList:
        principal_id = require_principal()
        services = get_data_room_services()
        settings = services.settings
        page_size = min(limit or settings.activity_default_limit, settings.activity_max_limit)
        with domain_errors():
            page = services.rooms.recent_activity(
                principal_id,
                room_id=data_room_id,
                limit=page_size,
                cursor=cursor,
            )
        return ActivityList(
            items=[to_activity_record(entry) for entry in page.items],
            nextCursor=page.next_cursor,
        )
