"""Database model package."""

from .principal import PrincipalRecord
from .data_room import DataRoomRecord, FolderRecord
from .grant import ROOM_SCOPE_KEY, GrantRecord
from .access_request import AccessRequestRecord
from .activity import ActivityRecord

__all__ = [
    "PrincipalRecord",
    "DataRoomRecord",
    "FolderRecord",
    "GrantRecord",
    "ROOM_SCOPE_KEY",
    "AccessRequestRecord",
    "ActivityRecord",
]
