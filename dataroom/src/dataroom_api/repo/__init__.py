"""Repository layer for data access."""

from .access_requests import AccessRequestRepository
from .activity import ActivityRepository
from .grants import GrantRepository
from .principals import PrincipalRepository
from .rooms import DataRoomRepository, FolderRepository

__all__ = [
    "AccessRequestRepository",
    "ActivityRepository",
    "DataRoomRepository",
    "FolderRepository",
    "GrantRepository",
    "PrincipalRepository",
]
