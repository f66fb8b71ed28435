from .data_rooms_api import DataRoomsApiImpl  # noqa: F401
from .access_requests_api import AccessRequestsApiImpl  # noqa: F401
from .activity_api import ActivityApiImpl  # noqa: F401
