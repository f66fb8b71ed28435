"""Service layer: transactional operations over the repositories."""

from .access_requests import AccessRequestWorkflow, resolve_grant_capabilities
from .activity import ActivityRecorder, describe_activity
from .facade import DataRoomServices, get_data_room_services, set_data_room_services
from .notifier import LoggingNotifier, Notifier
from .permissions import PermissionService
from .rooms import RoomService, RoomView
from .sweeper import ArchiveSweeper

__all__ = [
    "AccessRequestWorkflow",
    "ActivityRecorder",
    "ArchiveSweeper",
    "DataRoomServices",
    "LoggingNotifier",
    "Notifier",
    "PermissionService",
    "RoomService",
    "RoomView",
    "describe_activity",
    "get_data_room_services",
    "resolve_grant_capabilities",
    "set_data_room_services",
]
